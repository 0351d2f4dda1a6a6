from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from ghroulette.core.models import Issue

FETCH_ISSUES_BATCH = 100
USER_AGENT = "github-issue-roulette"
UNTRIAGED_QUALIFIERS = "is:open is:issue no:milestone no:assignee"


@dataclass(frozen=True)
class RateLimitStatus:
    remaining: int | None
    reset_at: datetime | None


def build_client(token: str, api_base: str, timeout: float = 30.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=api_base,
        headers={
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        },
        timeout=timeout,
    )


class GitHubIssueSearch:
    """Reads the oldest untriaged issues of one repository via the search API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        owner: str,
        repo: str,
        additional_query: str = "",
        page_size: int = FETCH_ISSUES_BATCH,
    ) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = client
        self._owner = owner
        self._repo = repo
        self._additional_query = additional_query
        self._page_size = page_size

    @property
    def query(self) -> str:
        parts = [UNTRIAGED_QUALIFIERS, f"repo:{self._owner}/{self._repo}"]
        if self._additional_query:
            parts.append(self._additional_query)
        return " ".join(parts)

    async def fetch_oldest(self, max_wanted: int | None = None) -> list[Issue]:
        issues: list[Issue] = []
        page = 1
        while True:
            self._logger.info(
                "Fetching issues",
                extra={"range": f"{len(issues)}-{len(issues) + self._page_size}", "page": page},
            )
            batch = await self.fetch_page(page)
            issues.extend(batch)
            if max_wanted is not None and len(issues) >= max_wanted:
                return issues[:max_wanted]
            if len(batch) < self._page_size:
                return issues
            page += 1

    async def fetch_page(self, page: int) -> list[Issue]:
        params = {
            "q": self.query,
            "sort": "updated",
            "order": "asc",
            "per_page": self._page_size,
            "page": page,
        }
        response = await self._client.get("/search/issues", params=params)
        self._warn_on_rate_limit(response)
        response.raise_for_status()
        payload = response.json()
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise ValueError("GitHub search response did not contain an 'items' list")
        if payload.get("incomplete_results"):
            self._logger.warning("GitHub search returned incomplete results", extra={"page": page})
        return [_issue_from_search_item(item) for item in items]

    def _warn_on_rate_limit(self, response: httpx.Response) -> None:
        rate_limit = _parse_rate_limit(response.headers)
        if rate_limit.remaining is not None and rate_limit.remaining <= 1:
            self._logger.warning(
                "GitHub rate limit nearly exhausted",
                extra={
                    "remaining": rate_limit.remaining,
                    "reset_at": rate_limit.reset_at.isoformat()
                    if rate_limit.reset_at
                    else None,
                },
            )


def _issue_from_search_item(item: dict[str, Any]) -> Issue:
    return Issue(
        number=int(item["number"]),
        title=item.get("title") or "",
        url=item.get("html_url") or "",
        updated_at=_parse_iso8601(item.get("updated_at")),
    )


def _parse_rate_limit(headers: httpx.Headers | dict) -> RateLimitStatus:
    remaining = headers.get("X-RateLimit-Remaining")
    reset = headers.get("X-RateLimit-Reset")
    remaining_val = int(remaining) if remaining and remaining.isdigit() else None
    reset_at = (
        datetime.fromtimestamp(int(reset), tz=timezone.utc) if reset and reset.isdigit() else None
    )
    return RateLimitStatus(remaining=remaining_val, reset_at=reset_at)


def _parse_iso8601(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
