"""Daily habit check-offs."""

from __future__ import annotations

from vita.sections.base import Section
from vita.store.migrations import rename_habit


class HabitsSection(Section):
    name = "habits"

    def habits(self) -> list[str]:
        return self.store.get_settings().get("habits", [])

    def toggle(self, habit: str, day: str | None = None) -> bool:
        """Flip a habit's completion for the day. Returns the new state."""
        done = self.store.get_day(self._date(day))["habits"]
        done[habit] = not done.get(habit, False)
        self.request_save()
        return done[habit]

    def completed(self, day: str | None = None) -> list[str]:
        done = self.store.get_day(self._date(day))["habits"]
        return [name for name, value in done.items() if value]

    def rename(self, old: str, new: str) -> None:
        """Rename a habit everywhere it is referenced."""
        rename_habit(self.store.get_data(), old, new)
        self.request_save()
