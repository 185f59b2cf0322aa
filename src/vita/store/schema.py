"""Default shapes for a brand-new document and for a Day Record."""

from __future__ import annotations

import copy
from typing import Any

CURRENT_VERSION = "1.4"

# Documents saved before the watermark existed
LEGACY_VERSION = "1.0"

_SETTINGS_DEFAULTS: dict[str, Any] = {
    "pin_hash": None,
    "habits": ["Reading", "Gym", "Photo Stroll"],
    "moderation_substances": [
        {"id": "alcohol", "name": "Alcohol", "default_unit": "drinks"},
        {"id": "cannabis", "name": "Cannabis", "default_unit": "sessions"},
        {"id": "coffee", "name": "Coffee", "default_unit": "cups"},
    ],
    "symptom_categories": ["Eyes", "Body Pain", "GI", "Headaches", "Other"],
    "theme": "system",
    "weather_unit": "auto",
}

_DOCUMENT_DEFAULTS: dict[str, Any] = {
    "version": CURRENT_VERSION,
    "settings": _SETTINGS_DEFAULTS,
    "days": {},
    "issues": {},
    "medications": {},
    "books": {},
}

_DAY_DEFAULTS: dict[str, Any] = {
    "habits": {},
    "moderation": {},
    "issue_logs": [],
    "sleep": None,
    "mood": None,
    "food": {"notes": "", "entries": []},
    "medications_taken": [],
    "social": [],
    "reading": [],
    "gym": {"muscle_groups": []},
    "note": "",
    "gratitudes": [],
    "bowel": [],
}

DAY_BUCKETS = tuple(_DAY_DEFAULTS)


def new_document() -> dict[str, Any]:
    """Return the document for a user with no prior data."""
    return copy.deepcopy(_DOCUMENT_DEFAULTS)


def new_settings() -> dict[str, Any]:
    return copy.deepcopy(_SETTINGS_DEFAULTS)


def new_day() -> dict[str, Any]:
    """Return a Day Record with every bucket at its empty default."""
    return copy.deepcopy(_DAY_DEFAULTS)


def bucket_default(name: str) -> Any:
    """Return a fresh empty default for a single Day Record bucket."""
    return copy.deepcopy(_DAY_DEFAULTS[name])
