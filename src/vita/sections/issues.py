"""Health issues and their per-day check-in logs."""

from __future__ import annotations

import uuid

from vita.sections.base import Section


class IssuesSection(Section):
    name = "issues"

    def _issues(self) -> dict:
        data = self.store.get_data()
        if not isinstance(data.get("issues"), dict):
            data["issues"] = {}
        return data["issues"]

    def _log(
        self, issue_id: str, symptoms: list[str], severity: int, note: str, day: str
    ) -> dict:
        entry = {
            "id": str(uuid.uuid4()),
            "issue_id": issue_id,
            "symptoms": list(symptoms),
            "severity": severity,
            "note": note.strip(),
        }
        self.store.get_day(day)["issue_logs"].append(entry)
        return entry

    def open_issue(
        self,
        name: str,
        category: str = "",
        symptoms: list[str] | None = None,
        severity: int = 3,
        note: str = "",
        ongoing: bool = False,
        day: str | None = None,
    ) -> str:
        """Create an issue and its first log entry. Returns the issue id."""
        name = name.strip()
        if not name:
            raise ValueError("Issue name is required")
        day = self._date(day)
        issue_id = str(uuid.uuid4())
        self._issues()[issue_id] = {
            "id": issue_id,
            "name": name,
            "category": category,
            "start_date": day,
            "end_date": None,
            "resolved": False,
            "ongoing": ongoing,
        }
        self._log(issue_id, symptoms or [], severity, note, day)
        self.request_save()
        return issue_id

    def check_in(
        self,
        issue_id: str,
        symptoms: list[str] | None = None,
        severity: int = 3,
        note: str = "",
        day: str | None = None,
    ) -> dict:
        entry = self._log(issue_id, symptoms or [], severity, note, self._date(day))
        self.request_save()
        return entry

    def resolve(self, issue_id: str, day: str | None = None) -> bool:
        issue = self._issues().get(issue_id)
        if not issue:
            return False
        issue["resolved"] = True
        issue["end_date"] = self._date(day)
        self.request_save()
        return True

    def active(self) -> list[dict]:
        """Ongoing issues that are not yet resolved."""
        return [i for i in self._issues().values() if i.get("ongoing") and not i.get("resolved")]
