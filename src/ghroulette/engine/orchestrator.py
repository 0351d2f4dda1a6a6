from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ghroulette.config.models import RouletteSettings
from ghroulette.core.interfaces import IssueSource
from ghroulette.core.models import Assignment, RunResult
from ghroulette.engine.dispatch import ActionDispatcher
from ghroulette.engine.partition import plan_assignments


@dataclass(frozen=True)
class RouletteRun:
    issue_source: IssueSource
    dispatcher: ActionDispatcher
    config: RouletteSettings
    rng: random.Random | None = None

    async def run_once(self) -> RunResult:
        logger = logging.getLogger("RouletteRun")
        repository = f"{self.config.github.owner}/{self.config.github.repo}"
        roulette = self.config.roulette

        if self.config.runtime.dry_run:
            logger.info("Dry-run enabled!")

        issues = await self.issue_source.fetch_oldest(roulette.issues_to_pull_from)
        logger.info(
            "Found untriaged issues",
            extra={"repository": repository, "count": len(issues)},
        )

        if self.config.required_issues > len(issues):
            logger.info(
                "Not enough open issues for issue roulette! Congratulations!",
                extra={
                    "repository": repository,
                    "required": self.config.required_issues,
                    "available": len(issues),
                },
            )
            return RunResult(fetched=len(issues), insufficient=True)

        assignments = plan_assignments(
            issues, roulette.assignees, roulette.assignments, rng=self.rng
        )
        for assignment in assignments:
            _log_assignment(logger, assignment)

        report = await self.dispatcher.dispatch(assignments)
        for failure in report.failures:
            logger.error(
                "Issue write failed",
                extra={
                    "issue_number": failure.issue_number,
                    "assignee": failure.assignee,
                    "action": failure.action,
                    "error": str(failure.error) or type(failure.error).__name__,
                },
            )
        logger.info(
            "Issue roulette complete",
            extra={
                "assignments": len(assignments),
                "writes_succeeded": report.succeeded,
                "writes_failed": len(report.failures),
            },
        )
        return RunResult(fetched=len(issues), assignments=assignments, report=report)


def _log_assignment(logger: logging.Logger, assignment: Assignment) -> None:
    issue = assignment.issue
    updated = issue.updated_at.isoformat() if issue.updated_at else "unknown"
    logger.info(
        "Assigning issue",
        extra={
            "issue_number": issue.number,
            "title": issue.title,
            "assignee": assignment.assignee,
            "url": issue.url,
            "last_updated": updated,
        },
    )
