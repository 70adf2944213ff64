"""Pact Broker connection settings.

The publisher never reads the process environment itself. A boundary layer
(the CLI, a CI test) resolves a ``BrokerEndpoint`` once from an explicit
mapping and hands it to ``PactBrokerPublisher``.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.pact_publishing.constants import (
    BRANCH_ENV_CHAIN,
    LOCAL_VERSION_PREFIX,
    LOCAL_VERSION_TIME_FORMAT,
    VERSION_ENV_CHAIN,
    BrokerEnv,
)


@dataclass(frozen=True)
class BrokerEndpoint:
    """Immutable broker address, consumer version and credentials.

    Args:
        base_url: Broker base URL (e.g. https://your-broker.pactflow.io).
            A trailing slash is stripped.
        consumer_version: Unique version string, typically the git SHA.
        branch: Optional branch name the consumer version is tagged with.
        tag: Optional extra tag applied to the consumer version.
        token: Bearer token (Pactflow / token auth). Takes precedence over
            username/password.
        username: Basic auth username.
        password: Basic auth password.
    """

    base_url: str
    consumer_version: str
    branch: str | None = None
    tag: str | None = None
    token: str | None = field(default=None, repr=False)
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def _first_set(environ: Mapping[str, str], names: list[str]) -> str | None:
    for name in names:
        value = _non_blank(environ.get(name))
        if value is not None:
            return value
    return None


def local_version(now: datetime | None = None) -> str:
    """Fallback consumer version for publishing outside CI, unique per second."""
    moment = now or datetime.now(timezone.utc)
    return f"{LOCAL_VERSION_PREFIX}{moment.astimezone(timezone.utc).strftime(LOCAL_VERSION_TIME_FORMAT)}"


def resolve_broker_endpoint(
    environ: Mapping[str, str],
    *,
    now: Callable[[], datetime] | None = None,
) -> BrokerEndpoint | None:
    """Build a ``BrokerEndpoint`` from named settings.

    Args:
        environ: Settings keyed by the ``BrokerEnv`` names, usually
            ``os.environ`` merged with CLI overrides.
        now: Clock used for the local fallback version. Defaults to UTC now.

    Returns:
        The endpoint, or None when no broker URL is configured. None means
        "publishing skipped", not a failure.
    """
    base_url = _non_blank(environ.get(BrokerEnv.URL))
    if base_url is None:
        return None

    version = _first_set(environ, VERSION_ENV_CHAIN)
    if version is None:
        version = local_version(now() if now else None)

    return BrokerEndpoint(
        base_url=base_url.strip(),
        consumer_version=version,
        branch=_first_set(environ, BRANCH_ENV_CHAIN),
        tag=_non_blank(environ.get(BrokerEnv.TAG)),
        token=_non_blank(environ.get(BrokerEnv.TOKEN)),
        username=_non_blank(environ.get(BrokerEnv.USERNAME)),
        password=environ.get(BrokerEnv.PASSWORD),
    )
