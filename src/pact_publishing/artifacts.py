"""Pact file discovery and participant extraction."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from src.pact_publishing.constants import PACT_FILE_PATTERN
from src.pact_publishing.models import ParticipantLookup, ParticipantsFound, ParticipantsNotFound

logger = logging.getLogger(__name__)


def find_pact_files(directory: str | Path) -> list[Path]:
    """Return the regular ``*.json`` files directly inside ``directory``, sorted.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return sorted(path for path in Path(directory).glob(PACT_FILE_PATTERN) if path.is_file())


def _participant_name(document: dict[str, Any], role: str) -> str | None:
    participant = document.get(role)
    if not isinstance(participant, dict):
        return None
    name = participant.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return name


def extract_participants(pact_file: str | Path) -> ParticipantLookup:
    """Read ``consumer.name`` and ``provider.name`` from a pact file.

    Unreadable files, invalid JSON and missing or non-string names all come
    back as ``ParticipantsNotFound`` so the caller can record the file and
    move on. Nothing else in the document is validated.
    """
    path = Path(pact_file)
    try:
        document = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.debug("Cannot parse pact file %s: %s", path, exc)
        return ParticipantsNotFound(f"cannot parse {path}: {exc}")

    if not isinstance(document, dict):
        return ParticipantsNotFound(f"{path} is not a JSON object")

    consumer = _participant_name(document, "consumer")
    provider = _participant_name(document, "provider")
    if consumer is None or provider is None:
        missing = [role for role, name in (("consumer", consumer), ("provider", provider)) if name is None]
        return ParticipantsNotFound(f"{path} has no {' or '.join(f'{role}.name' for role in missing)}")

    return ParticipantsFound(consumer=consumer, provider=provider)
