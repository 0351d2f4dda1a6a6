from pathlib import Path

import pytest

from ghroulette import cli

CONFIG = """
runtime:
  dry_run: {dry_run}
github:
  owner: o
  repo: r
  token: t
roulette:
  assignments: 1
  assignees: [alice]
  labels_to_add: [triage]
"""


def _write_config(tmp_path: Path, dry_run: bool) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG.format(dry_run=str(dry_run).lower()), encoding="utf-8")
    return str(path)


def test_dry_run_flag_overrides_live_config(tmp_path, monkeypatch, fake_github) -> None:
    fake = fake_github(total_issues=3)
    monkeypatch.setattr(cli, "build_client", lambda token, api_base: fake.client())

    cli.main(["--config", _write_config(tmp_path, dry_run=False), "run-once", "--dry-run"])

    assert len(fake.searches) == 1
    assert fake.writes == []


def test_live_run_from_cli_writes(tmp_path, monkeypatch, fake_github) -> None:
    fake = fake_github(total_issues=3)
    monkeypatch.setattr(cli, "build_client", lambda token, api_base: fake.client())

    cli.main(["--config", _write_config(tmp_path, dry_run=False), "run-once"])

    assert len(fake.writes) == 3


def test_list_stale_prints_issues(tmp_path, monkeypatch, fake_github, capsys) -> None:
    fake = fake_github(total_issues=3)
    monkeypatch.setattr(cli, "build_client", lambda token, api_base: fake.client())

    cli.main(["--config", _write_config(tmp_path, dry_run=True), "list-stale", "--limit", "2"])

    out = capsys.readouterr().out
    assert "2 untriaged issues in o/r" in out
    assert "#1000" in out and "#1001" in out
    assert "#1002" not in out
    assert fake.writes == []


def test_run_failure_is_logged_without_exit_code(tmp_path, monkeypatch) -> None:
    import httpx

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Bad credentials"})

    monkeypatch.setattr(
        cli,
        "build_client",
        lambda token, api_base: httpx.AsyncClient(
            base_url=api_base, transport=httpx.MockTransport(handler)
        ),
    )

    cli.main(["--config", _write_config(tmp_path, dry_run=True), "run-once"])


def test_config_error_exits_nonzero(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(tmp_path / "missing.yaml"), "run-once"])
    assert excinfo.value.code == 1
