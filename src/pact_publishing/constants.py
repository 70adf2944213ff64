"""Canonical names shared by the consumer contract tests and the publisher.

Participant names MUST match exactly between the consumer tests that write
the pact files and the provider verification that reads them from the broker.
Import them from here rather than repeating the literals.
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Pact participants
# ---------------------------------------------------------------------------

PROVIDER_NAME: str = "NIOP-Beat-Inventory-Api"

PCAW_CONSUMER_NAME: str = "PCAW-Consumer"

ALL_CONSUMER_NAMES: list[str] = [PCAW_CONSUMER_NAME]

# ---------------------------------------------------------------------------
# Provider endpoints exercised by the consumer contracts
# ---------------------------------------------------------------------------

UPDATE_DEVICE_INFORMATION_PATH: str = "/api/UpdateDeviceInformation"

# ---------------------------------------------------------------------------
# Pact Broker
# ---------------------------------------------------------------------------

DEFAULT_BROKER_URL: str = "http://localhost:9292"

PUBLISH_PATH_TEMPLATE: str = "/pacts/provider/{provider}/consumer/{consumer}/version/{version}"
TAG_PATH_TEMPLATE: str = "/pacticipants/{consumer}/versions/{version}/tags/{tag}"

LOCAL_VERSION_PREFIX: str = "local-"
LOCAL_VERSION_TIME_FORMAT: str = "%Y%m%d%H%M%S"


class BrokerEnv:
    """Environment variables read by the publish step (CI sets these)."""

    URL: str = "PACT_BROKER_BASE_URL"
    TOKEN: str = "PACT_BROKER_TOKEN"
    USERNAME: str = "PACT_BROKER_USERNAME"
    PASSWORD: str = "PACT_BROKER_PASSWORD"

    CONSUMER_VERSION: str = "CONSUMER_VERSION"
    GITHUB_SHA: str = "GITHUB_SHA"

    GITHUB_REF_NAME: str = "GITHUB_REF_NAME"
    GIT_BRANCH: str = "GIT_BRANCH"

    TAG: str = "PACT_TAG"

    PACT_DIR: str = "PACT_DIR"


# Priority order: first non-blank value wins.
VERSION_ENV_CHAIN: list[str] = [BrokerEnv.CONSUMER_VERSION, BrokerEnv.GITHUB_SHA]
BRANCH_ENV_CHAIN: list[str] = [BrokerEnv.GITHUB_REF_NAME, BrokerEnv.GIT_BRANCH]

# ---------------------------------------------------------------------------
# Pact file output
# ---------------------------------------------------------------------------

DEFAULT_PACT_DIR: str = "pacts"
PACT_FILE_PATTERN: str = "*.json"
