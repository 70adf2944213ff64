"""Result types passed between the inspector, the publisher and its callers."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ParticipantsFound:
    """Consumer and provider names read from a pact file."""

    consumer: str
    provider: str


@dataclass(frozen=True)
class ParticipantsNotFound:
    """The pact file could not be read or lacks a participant name."""

    reason: str


ParticipantLookup = Union[ParticipantsFound, ParticipantsNotFound]


@dataclass(frozen=True)
class PublishOutcome:
    """Result of publishing one pact file (or of a batch that never started).

    The message carries enough detail (URL, status, reason, body) to diagnose
    a failure from CI logs alone.
    """

    success: bool
    message: str

    @classmethod
    def ok(cls, message: str) -> PublishOutcome:
        return cls(True, message)

    @classmethod
    def failed(cls, message: str) -> PublishOutcome:
        return cls(False, message)

    def status_line(self) -> str:
        """One-line rendering for CI output: ``[OK] ...`` or ``[FAIL] ...``."""
        return f"[{'OK' if self.success else 'FAIL'}] {self.message}"


def all_succeeded(outcomes: Iterable[PublishOutcome]) -> bool:
    """Return True only if there is at least one outcome and none failed."""
    outcomes = list(outcomes)
    return bool(outcomes) and all(outcome.success for outcome in outcomes)
