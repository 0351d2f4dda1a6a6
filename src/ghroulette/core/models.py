from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    url: str
    updated_at: datetime | None


@dataclass(frozen=True)
class Assignment:
    issue: Issue
    assignee: str


@dataclass(frozen=True)
class WriteFailure:
    issue_number: int
    assignee: str
    action: str  # "comment" | "assign" | "label"
    error: BaseException


@dataclass(frozen=True)
class DispatchReport:
    succeeded: int
    failures: list[WriteFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class RunResult:
    fetched: int
    assignments: list[Assignment] = field(default_factory=list)
    report: DispatchReport | None = None
    insufficient: bool = False
