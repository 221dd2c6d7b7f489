"""Inline markdown link and heading extraction.

Parsing is line-oriented: a link whose brackets span two physical lines is
not recognised.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LINK_RE = re.compile(r'\[([^\]]*)\]\(([^)\s]+)(?:\s+"([^"]*)")?\)')
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
EXTERNAL_PREFIXES: tuple[str, ...] = ("http://", "https://", "mailto:", "#")


@dataclass(frozen=True)
class MarkdownLink:
    text: str
    target: str
    is_internal: bool
    line: int
    start: int
    end: int
    title: str | None = None


@dataclass(frozen=True)
class MarkdownHeading:
    level: int
    text: str
    line: int


def is_internal_target(target: str) -> bool:
    return not target.startswith(EXTERNAL_PREFIXES)


def extract_links(content: str) -> list[MarkdownLink]:
    links: list[MarkdownLink] = []
    for line_no, line in enumerate(content.split("\n"), start=1):
        for match in _LINK_RE.finditer(line):
            text, target, title = match.group(1), match.group(2), match.group(3)
            links.append(
                MarkdownLink(
                    text=text,
                    target=target,
                    is_internal=is_internal_target(target),
                    line=line_no,
                    start=match.start(),
                    end=match.end(),
                    title=title or None,
                )
            )
    return links


def extract_internal_links(content: str) -> list[MarkdownLink]:
    return [link for link in extract_links(content) if link.is_internal]


def extract_headings(content: str) -> list[MarkdownHeading]:
    headings: list[MarkdownHeading] = []
    for line_no, line in enumerate(content.split("\n"), start=1):
        match = _HEADING_RE.match(line)
        if match:
            headings.append(
                MarkdownHeading(
                    level=len(match.group(1)),
                    text=match.group(2).strip(),
                    line=line_no,
                )
            )
    return headings


def extract_title(content: str) -> str | None:
    for heading in extract_headings(content):
        if heading.level == 1:
            return heading.text
    return None
