"""Publish pact files to a Pact Broker through its REST API.

Pact Broker API used:
    PUT /pacts/provider/{provider}/consumer/{consumer}/version/{version}
    PUT /pacticipants/{consumer}/versions/{version}/tags/{tag}

Every documented failure (missing file, unparseable pact, broker rejection,
unreachable broker) becomes a failed ``PublishOutcome``; nothing is retried.
Tagging is best effort: its result never changes the publish outcome.
"""
from __future__ import annotations

import base64
import logging
from pathlib import Path
from types import TracebackType
from urllib.parse import quote

import httpx

from src.pact_publishing.artifacts import extract_participants, find_pact_files
from src.pact_publishing.config import BrokerEndpoint
from src.pact_publishing.constants import PUBLISH_PATH_TEMPLATE, TAG_PATH_TEMPLATE
from src.pact_publishing.models import ParticipantsNotFound, PublishOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: float = 30.0


def _segment(value: str) -> str:
    """Percent-escape a value for use as a single URL path segment."""
    return quote(value, safe="")


def build_auth_headers(endpoint: BrokerEndpoint) -> dict[str, str]:
    """Return the Authorization header for the endpoint's credentials.

    A bearer token wins; otherwise basic auth when a username is set;
    otherwise no header at all.
    """
    if endpoint.token:
        return {"Authorization": f"Bearer {endpoint.token}"}
    if endpoint.username:
        raw = f"{endpoint.username}:{endpoint.password or ''}".encode("utf-8")
        return {"Authorization": f"Basic {base64.b64encode(raw).decode('ascii')}"}
    return {}


class PactBrokerPublisher:
    """Publishes pact files for one consumer version to one broker.

    Args:
        endpoint: Broker address, consumer version, labels and credentials.
        client: Optional shared ``httpx.AsyncClient``. When omitted the
            publisher creates its own and closes it in ``aclose()``.
        timeout: Request timeout in seconds for the client it creates.
    """

    def __init__(
        self,
        endpoint: BrokerEndpoint,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._endpoint = endpoint
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self._headers = {"Accept": "application/json", **build_auth_headers(endpoint)}

    @property
    def endpoint(self) -> BrokerEndpoint:
        return self._endpoint

    async def __aenter__(self) -> PactBrokerPublisher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def publish_url(self, consumer: str, provider: str) -> str:
        path = PUBLISH_PATH_TEMPLATE.format(
            provider=_segment(provider),
            consumer=_segment(consumer),
            version=_segment(self._endpoint.consumer_version),
        )
        return f"{self._endpoint.base_url}{path}"

    def tag_url(self, consumer: str, tag: str) -> str:
        path = TAG_PATH_TEMPLATE.format(
            consumer=_segment(consumer),
            version=_segment(self._endpoint.consumer_version),
            tag=_segment(tag),
        )
        return f"{self._endpoint.base_url}{path}"

    # ------------------------------------------------------------------
    # Publish one pact
    # ------------------------------------------------------------------

    async def publish(self, consumer: str, provider: str, pact_file: str | Path) -> PublishOutcome:
        """Publish a single pact file.

        Args:
            consumer: Consumer participant name.
            provider: Provider participant name.
            pact_file: Path to the pact JSON file. Sent byte for byte.

        Returns:
            A successful outcome naming the URL, version and branch, or a
            failed outcome with the reason (status, reason phrase and body
            for broker rejections).
        """
        path = Path(pact_file)
        if not path.is_file():
            return PublishOutcome.failed(f"Pact file not found: {path}")

        try:
            content = path.read_bytes()
        except OSError as exc:
            return PublishOutcome.failed(f"Could not read pact file {path}: {exc}")

        url = self.publish_url(consumer, provider)
        logger.debug("PUT %s (%d bytes)", url, len(content))
        try:
            response = await self._client.put(
                url,
                content=content,
                headers={**self._headers, "Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Publishing %s failed: %s", path.name, exc)
            return PublishOutcome.failed(f"Failed to publish pact to {url}: {type(exc).__name__}: {exc}")

        if not response.is_success:
            logger.warning("Broker rejected %s with HTTP %d", path.name, response.status_code)
            return PublishOutcome.failed(
                f"Failed to publish pact. Status: {response.status_code} {response.reason_phrase}. "
                f"Body: {response.text}"
            )

        # Tag results are deliberately discarded: a flaky tag endpoint must not fail the publish.
        if self._endpoint.branch:
            await self.tag_version(consumer, self._endpoint.branch)
        if self._endpoint.tag:
            await self.tag_version(consumer, self._endpoint.tag)

        logger.info("Published %s -> %s", path.name, url)
        return PublishOutcome.ok(
            f"Published pact to {url} (consumer version: {self._endpoint.consumer_version}, "
            f"branch: {self._endpoint.branch or 'n/a'})"
        )

    async def tag_version(self, consumer: str, tag: str) -> bool:
        """Tag the consumer version. Best effort, never raises, never retried.

        Returns:
            True if the broker answered 2xx. Callers are free to ignore it.
        """
        url = self.tag_url(consumer, tag)
        logger.debug("PUT %s", url)
        try:
            response = await self._client.put(
                url,
                content=b"{}",
                headers={**self._headers, "Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Tagging %s version %s with %r failed: %s",
                consumer,
                self._endpoint.consumer_version,
                tag,
                exc,
            )
            return False

        if not response.is_success:
            logger.warning(
                "Tagging %s version %s with %r returned HTTP %d",
                consumer,
                self._endpoint.consumer_version,
                tag,
                response.status_code,
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Publish a directory
    # ------------------------------------------------------------------

    async def publish_all(self, pact_directory: str | Path) -> list[PublishOutcome]:
        """Publish every ``*.json`` pact file in ``pact_directory``.

        Files are processed one at a time, in sorted order. A file that cannot
        be published is recorded as a failure and the batch carries on.

        Returns:
            One outcome per pact file, or a single failed outcome when the
            directory is missing, unreadable or holds no pact files.
        """
        directory = Path(pact_directory)
        if not directory.is_dir():
            return [PublishOutcome.failed(f"Pact directory not found: {directory}")]

        try:
            pact_files = find_pact_files(directory)
        except OSError as exc:
            return [PublishOutcome.failed(f"Pact directory could not be read: {directory} ({exc})")]

        if not pact_files:
            return [PublishOutcome.failed(f"No pact JSON files found in: {directory}")]

        logger.info(
            "Publishing %d pact file(s) to %s as version %s",
            len(pact_files),
            self._endpoint.base_url,
            self._endpoint.consumer_version,
        )

        outcomes: list[PublishOutcome] = []
        for pact_file in pact_files:
            participants = extract_participants(pact_file)
            if isinstance(participants, ParticipantsNotFound):
                logger.warning("Skipping %s: %s", pact_file.name, participants.reason)
                outcomes.append(PublishOutcome.failed(f"Could not extract consumer/provider from: {pact_file}"))
                continue

            outcomes.append(await self.publish(participants.consumer, participants.provider, pact_file))

        failed = sum(1 for outcome in outcomes if not outcome.success)
        logger.info("Publish complete (%d ok, %d failed)", len(outcomes) - failed, failed)
        return outcomes
