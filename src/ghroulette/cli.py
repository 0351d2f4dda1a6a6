from __future__ import annotations

import argparse
import asyncio
import logging

import httpx

from ghroulette.adapters.github.rest import GitHubIssueSearch, build_client
from ghroulette.adapters.github.writer import build_issue_writer
from ghroulette.config.loader import load_config
from ghroulette.config.models import RouletteSettings
from ghroulette.core.errors import ConfigError
from ghroulette.core.models import RunResult
from ghroulette.engine.dispatch import ActionDispatcher
from ghroulette.engine.orchestrator import RouletteRun
from ghroulette.logging.setup import configure_logging


def build_run(config: RouletteSettings, client: httpx.AsyncClient) -> RouletteRun:
    issue_source = GitHubIssueSearch(
        client=client,
        owner=config.github.owner,
        repo=config.github.repo,
        additional_query=config.roulette.additional_query,
    )
    writer = build_issue_writer(
        config.runtime.dry_run,
        client=client,
        owner=config.github.owner,
        repo=config.github.repo,
    )
    dispatcher = ActionDispatcher(
        writer=writer,
        labels=config.roulette.labels_to_add,
        render_comment=config.roulette.render_comment,
    )
    return RouletteRun(issue_source=issue_source, dispatcher=dispatcher, config=config)


async def run_once(config: RouletteSettings) -> RunResult:
    async with build_client(config.github.token, str(config.github.api_base)) as client:
        return await build_run(config, client).run_once()


async def list_stale(config: RouletteSettings, limit: int | None) -> None:
    async with build_client(config.github.token, str(config.github.api_base)) as client:
        issue_source = GitHubIssueSearch(
            client=client,
            owner=config.github.owner,
            repo=config.github.repo,
            additional_query=config.roulette.additional_query,
        )
        issues = await issue_source.fetch_oldest(limit)
    print(f"{len(issues)} untriaged issues in {config.github.owner}/{config.github.repo}:")
    for issue in issues:
        updated = issue.updated_at.date().isoformat() if issue.updated_at else "unknown"
        print(f"  #{issue.number}  {updated}  {issue.title}")
        print(f"      {issue.url}")


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Randomly hand out stale untriaged GitHub issues to a list of people"
    )
    parser.add_argument("--config", required=True, help="Path to config YAML file")
    sub = parser.add_subparsers(dest="command", required=True)
    run_p = sub.add_parser("run-once", help="Pick, comment on, assign and label stale issues")
    run_p.add_argument(
        "--dry-run",
        action="store_true",
        help="Only log the writes that would happen, whatever the config says",
    )
    list_p = sub.add_parser("list-stale", help="List the oldest untriaged issues (read-only)")
    list_p.add_argument("--limit", type=_positive_int, default=None, help="Maximum issues to list")

    args = parser.parse_args(argv)
    logger = logging.getLogger("CLI")
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        configure_logging()
        logger.error("Fatal error: %s", exc)
        raise SystemExit(1) from exc

    if getattr(args, "dry_run", False) and not config.runtime.dry_run:
        config = config.model_copy(
            update={"runtime": config.runtime.model_copy(update={"dry_run": True})}
        )
    configure_logging(config.runtime.log_level)
    logger.info("Loaded configuration", extra={"dry_run": config.runtime.dry_run})

    try:
        if args.command == "run-once":
            asyncio.run(run_once(config))
        elif args.command == "list-stale":
            asyncio.run(list_stale(config, args.limit))
    except Exception:  # noqa: BLE001
        logger.exception("Issue roulette failed")


if __name__ == "__main__":
    main()
