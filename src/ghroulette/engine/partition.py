from __future__ import annotations

import random
from typing import Sequence

from ghroulette.core.models import Assignment, Issue


def _deal(
    issues: Sequence[Issue],
    assignees: Sequence[str],
    per_assignee: int,
    rng: random.Random | None,
) -> list[list[Issue]]:
    if per_assignee < 0:
        raise ValueError("per_assignee must be non-negative")
    if len(set(assignees)) != len(assignees):
        raise ValueError("assignees must be unique")
    needed = len(assignees) * per_assignee
    if needed > len(issues):
        raise ValueError(f"Need {needed} issues to partition, only {len(issues)} available")

    shuffled = list(issues)
    (rng or random.SystemRandom()).shuffle(shuffled)
    return [
        shuffled[index * per_assignee : (index + 1) * per_assignee]
        for index in range(len(assignees))
    ]


def partition_issues(
    issues: Sequence[Issue],
    assignees: Sequence[str],
    per_assignee: int,
    rng: random.Random | None = None,
) -> dict[str, list[Issue]]:
    """Shuffle issues and deal ``per_assignee`` of them to each assignee in order.

    Issues are drawn without replacement; anything past
    ``len(assignees) * per_assignee`` is left out.
    """
    chunks = _deal(issues, assignees, per_assignee, rng)
    return dict(zip(assignees, chunks))


def plan_assignments(
    issues: Sequence[Issue],
    assignees: Sequence[str],
    per_assignee: int,
    rng: random.Random | None = None,
) -> list[Assignment]:
    chunks = _deal(issues, assignees, per_assignee, rng)
    return [
        Assignment(issue=issue, assignee=assignee)
        for assignee, chunk in zip(assignees, chunks)
        for issue in chunk
    ]
