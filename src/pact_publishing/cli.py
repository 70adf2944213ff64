"""CI entry point: publish every pact file in a directory to the Pact Broker.

Skips cleanly (exit 0) when no broker URL is configured, so local runs
without a broker do not fail. Exit code 1 when any pact failed to publish.

Usage:
    python -m src.pact_publishing.cli --pact-dir pacts

Environment (flags override):
    PACT_BROKER_BASE_URL  – Pact Broker URL (required, gate)
    PACT_BROKER_TOKEN     – Bearer token  (or use USERNAME + PASSWORD)
    PACT_BROKER_USERNAME  – Basic-auth username
    PACT_BROKER_PASSWORD  – Basic-auth password
    CONSUMER_VERSION      – Defaults to GITHUB_SHA, then to a local timestamp
    GITHUB_REF_NAME       – Git branch (auto-set in GitHub Actions), else GIT_BRANCH
    PACT_TAG              – Extra tag for the consumer version
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Mapping, Sequence

import httpx

from src.pact_publishing.broker import DEFAULT_TIMEOUT_SECONDS, PactBrokerPublisher
from src.pact_publishing.config import resolve_broker_endpoint
from src.pact_publishing.constants import DEFAULT_PACT_DIR, BrokerEnv
from src.pact_publishing.models import PublishOutcome, all_succeeded

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PUBLISH_FAILED = 1


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the publish step."""
    parser = argparse.ArgumentParser(
        description="Publish consumer pact files to a Pact Broker"
    )
    parser.add_argument(
        "--pact-dir",
        default=os.getenv(BrokerEnv.PACT_DIR, DEFAULT_PACT_DIR),
        help="Directory holding the generated pact JSON files",
    )
    parser.add_argument(
        "--broker-url",
        default=None,
        help=f"Pact Broker base URL (default: ${BrokerEnv.URL}). Empty to skip publishing.",
    )
    parser.add_argument(
        "--consumer-version",
        default=None,
        help=f"Consumer version (default: ${BrokerEnv.CONSUMER_VERSION}, ${BrokerEnv.GITHUB_SHA}, local timestamp)",
    )
    parser.add_argument(
        "--branch",
        default=None,
        help=f"Branch to tag the version with (default: ${BrokerEnv.GITHUB_REF_NAME}, ${BrokerEnv.GIT_BRANCH})",
    )
    parser.add_argument(
        "--tag",
        default=None,
        help=f"Extra tag for the consumer version (default: ${BrokerEnv.TAG})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help="HTTP timeout per broker request, in seconds",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("PACT_PUBLISH_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser.parse_args(argv)


def _settings(args: argparse.Namespace, environ: Mapping[str, str]) -> dict[str, str]:
    """Merge CLI overrides on top of the environment."""
    settings = dict(environ)
    overrides = {
        BrokerEnv.URL: args.broker_url,
        BrokerEnv.CONSUMER_VERSION: args.consumer_version,
        BrokerEnv.GITHUB_REF_NAME: args.branch,
        BrokerEnv.TAG: args.tag,
    }
    for name, value in overrides.items():
        if value is not None:
            settings[name] = value
    return settings


def report(outcomes: Sequence[PublishOutcome]) -> None:
    """Print one line per pact file."""
    for outcome in outcomes:
        print(outcome.status_line())


async def run(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> int:
    """Publish the pact directory and return the process exit code.

    Args:
        argv: CLI arguments. Defaults to ``sys.argv[1:]``.
        environ: Settings source. Defaults to ``os.environ``.
        client: Optional HTTP client to reuse; left open afterwards.
    """
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    endpoint = resolve_broker_endpoint(_settings(args, os.environ if environ is None else environ))
    if endpoint is None:
        logger.warning("%s is not set — skipping pact publishing", BrokerEnv.URL)
        print(f"SKIPPED: {BrokerEnv.URL} is not set. Set the environment variable to enable pact publishing.")
        return EXIT_OK

    logger.info("Pact directory: %s", args.pact_dir)
    async with PactBrokerPublisher(endpoint, client=client, timeout=args.timeout) as publisher:
        outcomes = await publisher.publish_all(args.pact_dir)

    report(outcomes)
    if not all_succeeded(outcomes):
        return EXIT_PUBLISH_FAILED

    print(f"Successfully published {len(outcomes)} pact(s) to {endpoint.base_url}.")
    return EXIT_OK


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
