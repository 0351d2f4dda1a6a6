from __future__ import annotations

from typing import Protocol, Sequence

from ghroulette.core.models import Issue


class IssueSource(Protocol):
    async def fetch_oldest(self, max_wanted: int | None = None) -> list[Issue]:
        """Return the oldest untriaged issues, oldest first."""


class IssueWriter(Protocol):
    async def create_comment(self, issue_number: int, body: str) -> None:
        """Post a comment on an issue."""

    async def add_assignees(self, issue_number: int, assignees: Sequence[str]) -> None:
        """Add users to an issue's assignees."""

    async def add_labels(self, issue_number: int, labels: Sequence[str]) -> None:
        """Add labels to an issue."""
