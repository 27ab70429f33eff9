import unittest
from datetime import date

import habit_tracker


class ComputeStreakTests(unittest.TestCase):
    def setUp(self):
        self.today = date(2024, 1, 10)

    def test_empty_completions(self):
        self.assertEqual(habit_tracker.compute_streak([], self.today), 0)

    def test_three_consecutive_days_through_today(self):
        completions = ["2024-01-08", "2024-01-10", "2024-01-09"]
        self.assertEqual(habit_tracker.compute_streak(completions, self.today), 3)

    def test_missing_today_breaks_streak(self):
        completions = ["2024-01-09", "2024-01-08"]
        self.assertEqual(habit_tracker.compute_streak(completions, self.today), 0)

    def test_gap_stops_walk(self):
        completions = ["2024-01-10", "2024-01-07"]
        self.assertEqual(habit_tracker.compute_streak(completions, self.today), 1)

    def test_invalid_dates_are_skipped(self):
        completions = ["2024-01-10", "not-a-date", "2024-01-09", "2024-02-30"]
        self.assertEqual(habit_tracker.compute_streak(completions, self.today), 2)

    def test_duplicates_do_not_double_count(self):
        completions = ["2024-01-10", "2024-01-10", "2024-01-09"]
        self.assertEqual(habit_tracker.compute_streak(completions, self.today), 2)

    def test_streak_crosses_month_boundary(self):
        completions = ["2024-03-01", "2024-02-29", "2024-02-28"]
        self.assertEqual(habit_tracker.compute_streak(completions, date(2024, 3, 1)), 3)

    def test_future_dates_do_not_count(self):
        completions = ["2024-01-11", "2024-01-10"]
        self.assertEqual(habit_tracker.compute_streak(completions, self.today), 0)


class HabitStatsTests(unittest.TestCase):
    def test_stats_rows_sorted_by_name(self):
        store = {
            "workout": {"name": "workout", "completions": ["2024-01-10", "2024-01-09"]},
            "Reading": {"name": "Reading", "completions": ["2024-01-09"]},
            "meditate": {"name": "meditate", "completions": []},
        }
        rows = habit_tracker.habit_stats(store, date(2024, 1, 10))

        self.assertEqual(
            rows,
            [("Reading", 1, 0), ("meditate", 0, 0), ("workout", 2, 2)],
        )


if __name__ == "__main__":
    unittest.main()
