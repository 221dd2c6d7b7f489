"""YAML front matter: the author-declared side of a document's metadata."""

from __future__ import annotations

import logging
from typing import Mapping

import yaml

logger = logging.getLogger(__name__)

_FENCE = "---"


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Return ``(yaml_block, body)``; the block is ``None`` when absent."""
    if not text.startswith(_FENCE):
        return None, text
    lines = text.split("\n")
    if lines[0].rstrip("\r").strip() != _FENCE:
        return None, text
    for idx in range(1, len(lines)):
        if lines[idx].rstrip("\r").strip() == _FENCE:
            return "\n".join(lines[1:idx]), "\n".join(lines[idx + 1 :])
    return None, text


def parse_frontmatter(text: str) -> tuple[dict[str, object], str]:
    block, body = split_frontmatter(text)
    if block is None:
        return {}, text
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        logger.debug("ignoring malformed front matter: %s", exc)
        return {}, body
    if not isinstance(data, dict):
        return {}, body
    return {str(key): value for key, value in data.items()}, body


def declared_domains(metadata: Mapping[str, object]) -> tuple[str, ...]:
    """Domains an author declared via ``domains:`` (list) or ``domain:``."""
    raw = metadata.get("domains", metadata.get("domain"))
    if raw is None:
        return ()
    if isinstance(raw, str):
        values = [part.strip() for part in raw.split(",")]
    elif isinstance(raw, (list, tuple)):
        values = [str(item).strip() for item in raw if item is not None]
    else:
        return ()
    return tuple(value for value in values if value)


def declared_tier(metadata: Mapping[str, object]) -> str | None:
    raw = metadata.get("tier")
    return raw.strip() if isinstance(raw, str) and raw.strip() else None
