from __future__ import annotations

import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx
import pytest

# Ensure tests run against this repo's source tree (src-layout), not an unrelated
# globally installed `ghroulette` package.
_REPO_ROOT = Path(__file__).resolve().parent.parent
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from ghroulette.config.models import RouletteSettings  # noqa: E402

API_BASE = "https://api.github.com"


class FakeGitHub:
    """In-memory stand-in for the handful of GitHub endpoints the tool uses."""

    def __init__(self, total_issues: int = 0, fail_paths: set[str] | None = None) -> None:
        start = datetime(2020, 1, 1, tzinfo=timezone.utc)
        self.issues = [
            {
                "number": 1000 + index,
                "title": f"Stale issue {index}",
                "html_url": f"https://github.com/o/r/issues/{1000 + index}",
                "updated_at": (start + timedelta(days=index)).isoformat().replace("+00:00", "Z"),
            }
            for index in range(total_issues)
        ]
        self.fail_paths = fail_paths or set()
        self.searches: list[dict[str, str]] = []
        self.writes: list[tuple[str, dict]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "GET" and path == "/search/issues":
            params = dict(request.url.params)
            self.searches.append(params)
            per_page = int(params["per_page"])
            page = int(params["page"])
            items = self.issues[(page - 1) * per_page : page * per_page]
            return httpx.Response(
                200,
                json={"total_count": len(self.issues), "incomplete_results": False, "items": items},
            )
        if request.method == "POST":
            if path in self.fail_paths:
                return httpx.Response(403, json={"message": "Resource not accessible"})
            self.writes.append((path, json.loads(request.content)))
            return httpx.Response(201, json={})
        return httpx.Response(404, json={"message": "Not Found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=API_BASE, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_github() -> type[FakeGitHub]:
    return FakeGitHub


@pytest.fixture
def make_settings():
    def _make(
        assignees: list[str] | None = None,
        assignments: int = 2,
        issues_to_pull_from: int | None = None,
        labels_to_add: list[str] | None = None,
        dry_run: bool = True,
    ) -> RouletteSettings:
        return RouletteSettings.model_validate(
            {
                "runtime": {"dry_run": dry_run, "log_level": "INFO"},
                "github": {"owner": "o", "repo": "r", "token": "t", "api_base": API_BASE},
                "roulette": {
                    "assignments": assignments,
                    "issues_to_pull_from": issues_to_pull_from,
                    "assignees": assignees if assignees is not None else ["alice"],
                    "labels_to_add": labels_to_add if labels_to_add is not None else ["triage"],
                },
            }
        )

    return _make
