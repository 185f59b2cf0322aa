"""Bring a previously saved document up to the current schema.

Pipeline: merge_defaults() fills gaps from the schema defaults, then each
numbered migration runs in order if the watermark is below its version.
Every step is idempotent. A wrong-typed Day Record bucket is reset to its
empty default, with the old value kept under an ``_invalid_<bucket>`` key. A
record a step cannot handle at all is left untouched, logged and counted,
and the watermark still advances (best effort).
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from vita.errors import MigrationDataError
from vita.store.schema import DAY_BUCKETS, LEGACY_VERSION, bucket_default, new_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """One numbered structural change. ``apply`` returns the skipped-record count."""

    version: str
    description: str
    apply: Callable[[dict], int]


# ── Version watermark ─────────────────────────────────────────


def parse_version(text: Any) -> tuple[int, ...]:
    """Parse '1.4' → (1, 4). Anything malformed sorts below every migration."""
    try:
        return tuple(int(part) for part in str(text).split("."))
    except ValueError:
        return (0,)


def _stamp(doc: dict, version: str) -> None:
    """Raise the watermark to ``version``; never lower it."""
    if parse_version(doc.get("version")) < parse_version(version):
        doc["version"] = version


# ── Merge with defaults ───────────────────────────────────────


def merge_defaults(loaded: dict) -> dict:
    """Shallow merge over the defaults, with settings merged one level deep.

    Loaded values win. Nested per-entity maps and arrays are taken as-is so
    deleted entries are never resurrected. Unknown top-level keys survive.
    """
    loaded = copy.deepcopy(loaded)
    defaults = new_document()

    merged = {**defaults, **loaded}
    if "version" not in loaded:
        merged["version"] = LEGACY_VERSION

    settings = loaded.get("settings", {})
    if not isinstance(settings, dict):
        logger.warning(
            "Replacing malformed settings (%s) with defaults", type(settings).__name__
        )
        settings = {}
    merged["settings"] = {**defaults["settings"], **settings}
    return merged


# ── Helpers ───────────────────────────────────────────────────


def _container(parent: dict, key: str, kind: type, where: str) -> Any:
    """Return parent[key], replacing a missing or wrong-typed value with kind()."""
    value = parent.get(key)
    if isinstance(value, kind):
        return value
    if value is not None:
        logger.warning(
            "Replacing malformed %s (%s) with empty %s", where, type(value).__name__, kind.__name__
        )
    parent[key] = kind()
    return parent[key]


def _reset_bucket(day: dict, bucket: str, where: str) -> None:
    """Put a bucket back to its empty default, keeping a wrong-typed value aside."""
    value = day.get(bucket)
    if value is not None:
        stash = f"_invalid_{bucket}"
        if stash not in day:
            day[stash] = value
        logger.warning(
            "Replacing malformed %s (%s); original kept as %s", where, type(value).__name__, stash
        )
    day[bucket] = bucket_default(bucket)


def repair_day(day: dict, where: str = "day") -> None:
    """Back-fill missing buckets and reset wrong-typed ones to their empty default.

    Buckets whose default is None (sleep, mood) accept any stored value.
    """
    for bucket in DAY_BUCKETS:
        default = bucket_default(bucket)
        if bucket not in day:
            day[bucket] = default
        elif default is not None and not isinstance(day[bucket], type(default)):
            _reset_bucket(day, bucket, f"{where}.{bucket}")


def _iter_days(doc: dict) -> Iterator[tuple[str, Any]]:
    days = _container(doc, "days", dict, "days")
    yield from days.items()


def _for_each_day(doc: dict, step: str, transform: Callable[[str, dict], None]) -> int:
    """Apply ``transform`` to every Day Record; count records it rejects."""
    skipped = 0
    for date, day in _iter_days(doc):
        try:
            if not isinstance(day, dict):
                raise MigrationDataError(f"day record is {type(day).__name__}, not an object")
            transform(date, day)
        except MigrationDataError as e:
            skipped += 1
            logger.warning("Migration %s skipped day %s: %s", step, date, e)
    return skipped


def _severity(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ── 1.1 Habit rename ──────────────────────────────────────────


def rename_habit(doc: dict, old: str, new: str) -> int:
    """Rename a habit in settings and in every Day Record that references it."""
    habits = _container(doc["settings"], "habits", list, "settings.habits")
    if old in habits:
        if new in habits:
            habits.remove(old)
        else:
            habits[habits.index(old)] = new

    def _rename(date: str, day: dict) -> None:
        done = day.get("habits")
        if done is None:
            return
        if not isinstance(done, dict):
            _reset_bucket(day, "habits", f"days[{date}].habits")
            return
        if old in done:
            value = done.pop(old)
            done[new] = done.get(new) or value

    return _for_each_day(doc, f"rename {old!r}", _rename)


def _migrate_long_walk(doc: dict) -> int:
    return rename_habit(doc, "Long Walk", "Photo Stroll")


# ── 1.2 Coffee substance ──────────────────────────────────────


def _add_coffee(doc: dict) -> int:
    subs = _container(doc["settings"], "moderation_substances", list, "settings.moderation_substances")
    if not any(isinstance(s, dict) and s.get("id") == "coffee" for s in subs):
        subs.append({"id": "coffee", "name": "Coffee", "default_unit": "cups"})
    return 0


# ── 1.3 Ongoing issues → issues + issue_logs ──────────────────


def _consolidate_issues(doc: dict) -> int:
    skipped = 0
    issues = _container(doc, "issues", dict, "issues")

    legacy = doc.pop("ongoing_issues", None)
    leftovers: dict = {}
    if isinstance(legacy, dict):
        for issue_id, record in legacy.items():
            if not isinstance(record, dict):
                leftovers[issue_id] = record
                skipped += 1
                logger.warning("Migration 1.3 kept malformed ongoing issue %s in place", issue_id)
                continue
            if issue_id in issues:
                continue
            issue = dict(record)
            issue.setdefault("id", issue_id)
            issue.setdefault("name", "")
            issue.setdefault("category", "")
            issue.setdefault("start_date", None)
            issue.setdefault("end_date", None)
            issue["resolved"] = bool(issue.get("resolved", False))
            issue["ongoing"] = True
            issues[issue_id] = issue
    elif legacy is not None:
        leftovers = legacy
        skipped += 1
        logger.warning("Migration 1.3 kept malformed ongoing_issues (%s)", type(legacy).__name__)
    if leftovers:
        doc["ongoing_issues"] = leftovers

    def _convert(date: str, day: dict) -> None:
        entries = day.get("symptoms")
        if entries is None:
            return
        if not isinstance(entries, list):
            raise MigrationDataError(f"symptoms is {type(entries).__name__}, not a list")
        if not isinstance(day.get("issue_logs"), list):
            _reset_bucket(day, "issue_logs", f"days[{date}].issue_logs")
        logs = day["issue_logs"]
        seen = {log.get("id") for log in logs if isinstance(log, dict)}
        rejected = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                rejected.append(entry)
                continue
            log_id = entry.get("id") or f"legacy-{date}-{i}"
            if log_id in seen:
                continue
            category = entry.get("category")
            logs.append(
                {
                    "id": log_id,
                    # Kept even when the issue no longer exists
                    "issue_id": entry.get("issue_id"),
                    "symptoms": [category] if category else [],
                    "severity": _severity(entry.get("severity")),
                    "note": entry.get("description") or "",
                    "time": entry.get("time"),
                }
            )
            seen.add(log_id)
        if rejected:
            day["symptoms"] = rejected
            raise MigrationDataError(f"{len(rejected)} symptom entries are not objects")
        del day["symptoms"]

    return skipped + _for_each_day(doc, "1.3", _convert)


# ── 1.4 Scalar mood → mood/energy object ──────────────────────


def _normalize_mood(doc: dict) -> int:
    def _convert(date: str, day: dict) -> None:
        mood = day.get("mood")
        if mood is None or isinstance(mood, dict):
            return
        if isinstance(mood, bool):
            raise MigrationDataError("mood is a boolean")
        if isinstance(mood, str):
            try:
                mood = int(mood)
            except ValueError:
                raise MigrationDataError(f"mood {mood!r} is not a number") from None
        elif not isinstance(mood, (int, float)):
            raise MigrationDataError(f"mood is {type(mood).__name__}")
        day["mood"] = {"mood": mood, "energy": None}

    return _for_each_day(doc, "1.4", _convert)


MIGRATIONS: list[Migration] = [
    Migration("1.1", "rename habit 'Long Walk' to 'Photo Stroll'", _migrate_long_walk),
    Migration("1.2", "add coffee moderation substance", _add_coffee),
    Migration("1.3", "consolidate ongoing issues into issues/issue_logs", _consolidate_issues),
    Migration("1.4", "normalize scalar mood into mood/energy", _normalize_mood),
]


# ── Pipeline ──────────────────────────────────────────────────


def run_migrations(doc: dict) -> dict:
    """Apply every migration above the watermark, in order, in place."""
    for migration in MIGRATIONS:
        if parse_version(doc.get("version")) >= parse_version(migration.version):
            continue
        skipped = migration.apply(doc)
        _stamp(doc, migration.version)
        if skipped:
            logger.warning(
                "Migration %s (%s) applied with %d skipped record(s)",
                migration.version,
                migration.description,
                skipped,
            )
        else:
            logger.info("Migration %s applied: %s", migration.version, migration.description)
    return doc


def migrate(loaded: dict) -> dict:
    """Return a copy of ``loaded`` that satisfies the current schema."""
    return run_migrations(merge_defaults(loaded))
