from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Sequence

from ghroulette.core.interfaces import IssueWriter
from ghroulette.core.models import Assignment, DispatchReport, WriteFailure


class ActionDispatcher:
    """Fans out comment, assign and label writes for a batch of assignments.

    All writes start together and the batch settles as a whole. A failed
    write never cancels its siblings; every failure ends up in the report.
    """

    def __init__(
        self,
        writer: IssueWriter,
        labels: Sequence[str],
        render_comment: Callable[[str], str],
    ) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._writer = writer
        self._labels = list(labels)
        self._render_comment = render_comment

    def writes_for(self, assignment: Assignment) -> list[tuple[str, Awaitable[None]]]:
        number = assignment.issue.number
        return [
            ("comment", self._writer.create_comment(number, self._render_comment(assignment.assignee))),
            ("assign", self._writer.add_assignees(number, [assignment.assignee])),
            ("label", self._writer.add_labels(number, self._labels)),
        ]

    async def dispatch(self, assignments: Iterable[Assignment]) -> DispatchReport:
        pending: list[tuple[Assignment, str]] = []
        coroutines: list[Awaitable[None]] = []
        for assignment in assignments:
            for action, coroutine in self.writes_for(assignment):
                pending.append((assignment, action))
                coroutines.append(coroutine)

        results = await asyncio.gather(*coroutines, return_exceptions=True)

        failures: list[WriteFailure] = []
        for (assignment, action), result in zip(pending, results):
            if isinstance(result, BaseException):
                failures.append(
                    WriteFailure(
                        issue_number=assignment.issue.number,
                        assignee=assignment.assignee,
                        action=action,
                        error=result,
                    )
                )
        return DispatchReport(succeeded=len(results) - len(failures), failures=failures)
