#!/usr/bin/env python3
import argparse
import json
import logging
import os
import tempfile
from datetime import datetime, date, timedelta
from typing import List, Dict, Any, Optional, Tuple

DATA_PATH = "habits.json"
DATE_FORMAT = "%Y-%m-%d"

ADDED = "added"
ALREADY_EXISTS = "already_exists"
INVALID_NAME = "invalid_name"
MARKED = "marked"
ALREADY_DONE = "already_done"
NOT_FOUND = "not_found"

logger = logging.getLogger(__name__)

Store = Dict[str, Dict[str, Any]]


class HabitStoreError(Exception):
    """Raised when the habit file cannot be read or written."""

    def __init__(self, message: str, path: str, reason: Optional[BaseException] = None):
        super().__init__(message)
        self.path = path
        self.reason = reason


class DataCorruptionError(HabitStoreError):
    pass


class PersistenceWriteError(HabitStoreError):
    pass


def _today_local() -> date:
    return datetime.now().date()


def _parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def _format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def _normalize_habit(name: str, record: Any, path: str) -> Dict[str, Any]:
    if not isinstance(record, dict):
        raise DataCorruptionError(f"Habit '{name}' is not an object in {path}", path)
    raw = record.get("completions", [])
    if not isinstance(raw, list):
        raise DataCorruptionError(f"Completions for '{name}' are not a list in {path}", path)
    completions: List[str] = []
    for value in raw:
        if isinstance(value, str) and value not in completions:
            completions.append(value)
    return {"name": name, "completions": completions}


def load_store(path: str = DATA_PATH) -> Store:
    """Read the whole habit store from ``path``.

    A missing file is an empty store. Anything that exists but cannot be
    read or does not have the expected shape raises DataCorruptionError.
    """
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise DataCorruptionError(f"Could not read habits from {path}: {exc}", path, exc) from exc
    if not isinstance(data, dict):
        raise DataCorruptionError(f"Expected an object at the top of {path}", path)
    return {name: _normalize_habit(name, record, path) for name, record in data.items()}


def save_store(store: Store, path: str = DATA_PATH) -> None:
    """Write the whole store to ``path``, replacing the file atomically."""
    payload = {
        name: {"name": name, "completions": sorted(habit["completions"])}
        for name, habit in store.items()
    }
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path and os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_path)
        raise PersistenceWriteError(f"Could not save habits to {path}: {exc}", path, exc) from exc


def add_habit(store: Store, name: str) -> str:
    name = name.strip()
    if not name:
        return INVALID_NAME
    if name in store:
        return ALREADY_EXISTS
    store[name] = {"name": name, "completions": []}
    return ADDED


def mark_done(store: Store, name: str, day: date) -> str:
    habit = store.get(name)
    if habit is None:
        return NOT_FOUND
    day_key = _format_date(day)
    if day_key in habit["completions"]:
        return ALREADY_DONE
    habit["completions"].append(day_key)
    return MARKED


def list_habits(store: Store) -> List[str]:
    return sorted(store)


def compute_streak(completions: List[str], today: date) -> int:
    """Count consecutive completed days walking back from ``today``.

    The walk starts at today, so a habit not yet done today has a streak
    of 0 even if every earlier day was completed. Entries that are not
    valid dates are ignored.
    """
    if not completions:
        return 0
    dates = set()
    for value in completions:
        try:
            dates.add(_parse_date(value))
        except (TypeError, ValueError):
            continue

    streak = 0
    expected = today
    for day in sorted(dates, reverse=True):
        if day != expected:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def habit_stats(store: Store, today: date) -> List[Tuple[str, int, int]]:
    rows = []
    for name in list_habits(store):
        completions = store[name]["completions"]
        rows.append((name, len(completions), compute_streak(completions, today)))
    return rows


def _load_or_empty(path: str) -> Store:
    try:
        return load_store(path)
    except DataCorruptionError as exc:
        logger.warning("%s; starting with an empty habit list", exc)
        return {}


def _save_or_report(store: Store, path: str) -> None:
    try:
        save_store(store, path)
    except PersistenceWriteError as exc:
        logger.error("%s", exc)


def _print_empty() -> None:
    print("No habits tracked yet. Add one with 'habit add <name>'.")


def cmd_add(args: argparse.Namespace) -> None:
    store = _load_or_empty(args.data_path)
    name = args.name.strip()
    outcome = add_habit(store, name)
    if outcome == INVALID_NAME:
        print("Habit name cannot be empty.")
        return
    if outcome == ALREADY_EXISTS:
        print(f"Habit '{name}' already exists.")
    else:
        print(f"Added habit: {name}")
    _save_or_report(store, args.data_path)


def cmd_done(args: argparse.Namespace) -> None:
    store = _load_or_empty(args.data_path)
    today = _today_local()
    outcome = mark_done(store, args.name, today)
    if outcome == NOT_FOUND:
        print(f"Habit '{args.name}' not found. Add it first with 'habit add {args.name}'.")
    elif outcome == ALREADY_DONE:
        print(f"You already completed '{args.name}' today.")
    else:
        print(f"Marked '{args.name}' as done for {_format_date(today)}.")
    _save_or_report(store, args.data_path)


def cmd_list(args: argparse.Namespace) -> None:
    store = _load_or_empty(args.data_path)
    names = list_habits(store)
    if not names:
        _print_empty()
        return
    print("Your habits:")
    for name in names:
        print(f"  • {name}")


def cmd_stats(args: argparse.Namespace) -> None:
    store = _load_or_empty(args.data_path)
    rows = habit_stats(store, _today_local())
    if not rows:
        _print_empty()
        return
    print("Habit statistics")
    print(f"{'Habit':<20} {'Total Done':<15} {'Current Streak'}")
    print("-" * 50)
    for name, total, streak in rows:
        print(f"{name:<20} {total:<15} {streak} day(s)")


def build_parser(data_path: str = DATA_PATH) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habit", description="Track your daily habits")
    parser.set_defaults(data_path=data_path)
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a new habit to track")
    add.add_argument("name", help="Habit name (e.g. workout, reading)")
    add.set_defaults(func=cmd_add)

    done = sub.add_parser("done", help="Mark a habit as done for today")
    done.add_argument("name", help="Habit name")
    done.set_defaults(func=cmd_done)

    stats = sub.add_parser("stats", help="Show total completions and current streak per habit")
    stats.set_defaults(func=cmd_stats)

    list_cmd = sub.add_parser("list", help="List all habits")
    list_cmd.set_defaults(func=cmd_list)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
