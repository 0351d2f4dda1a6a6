from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ghroulette.core.interfaces import IssueWriter


class GitHubIssueWriter:
    """Performs issue writes against the GitHub REST API.

    Each call is a single POST. Failures raise ``httpx.HTTPError`` and are
    left to the caller to collect.
    """

    def __init__(self, client: httpx.AsyncClient, owner: str, repo: str) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = client
        self._owner = owner
        self._repo = repo

    async def create_comment(self, issue_number: int, body: str) -> None:
        await self._post(issue_number, "comments", {"body": body})
        self._logger.info("Commented on issue", extra={"issue_number": issue_number})

    async def add_assignees(self, issue_number: int, assignees: Sequence[str]) -> None:
        await self._post(issue_number, "assignees", {"assignees": list(assignees)})
        self._logger.info(
            "Assigned issue",
            extra={"issue_number": issue_number, "assignees": ",".join(assignees)},
        )

    async def add_labels(self, issue_number: int, labels: Sequence[str]) -> None:
        await self._post(issue_number, "labels", {"labels": list(labels)})
        self._logger.info(
            "Added labels to issue",
            extra={"issue_number": issue_number, "labels": ",".join(labels)},
        )

    async def _post(self, issue_number: int, endpoint: str, payload: dict) -> httpx.Response:
        path = f"/repos/{self._owner}/{self._repo}/issues/{issue_number}/{endpoint}"
        response = await self._client.post(path, json=payload)
        response.raise_for_status()
        return response


class DryRunIssueWriter:
    """Logs the writes that would happen. Never touches the network."""

    def __init__(self, owner: str, repo: str) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._owner = owner
        self._repo = repo

    async def create_comment(self, issue_number: int, body: str) -> None:
        self._logger.info(
            "DRYRUN: would comment on issue",
            extra={"issue_number": issue_number, "body": body},
        )

    async def add_assignees(self, issue_number: int, assignees: Sequence[str]) -> None:
        self._logger.info(
            "DRYRUN: would assign issue",
            extra={"issue_number": issue_number, "assignees": ",".join(assignees)},
        )

    async def add_labels(self, issue_number: int, labels: Sequence[str]) -> None:
        self._logger.info(
            "DRYRUN: would add labels to issue",
            extra={"issue_number": issue_number, "labels": ",".join(labels)},
        )


def build_issue_writer(
    dry_run: bool, client: httpx.AsyncClient, owner: str, repo: str
) -> IssueWriter:
    if dry_run:
        return DryRunIssueWriter(owner=owner, repo=repo)
    return GitHubIssueWriter(client=client, owner=owner, repo=repo)
