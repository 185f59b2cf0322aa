"""Mood and energy ratings."""

from __future__ import annotations

from vita.sections.base import Section

_FIELDS = ("mood", "energy")


class MoodSection(Section):
    name = "mood"

    def get(self, day: str | None = None) -> dict:
        mood = self.store.get_day(self._date(day))["mood"]
        return dict(mood) if isinstance(mood, dict) else {"mood": None, "energy": None}

    def set(self, field: str, value: int, day: str | None = None) -> int | None:
        """Set a rating; setting the current value again clears it."""
        if field not in _FIELDS:
            raise ValueError(f"Unknown mood field: {field}")
        record = self.store.get_day(self._date(day))
        if not isinstance(record["mood"], dict):
            record["mood"] = {"mood": None, "energy": None}
        current = record["mood"].get(field)
        record["mood"][field] = None if current == value else value
        self.request_save()
        return record["mood"][field]
