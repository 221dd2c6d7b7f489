"""Markdown link extraction and resolution."""

from docmesh.links.extract import (
    MarkdownHeading,
    MarkdownLink,
    extract_headings,
    extract_internal_links,
    extract_links,
    extract_title,
)
from docmesh.links.resolve import ResolvedTarget, resolve_link

__all__ = [
    "MarkdownHeading",
    "MarkdownLink",
    "ResolvedTarget",
    "extract_headings",
    "extract_internal_links",
    "extract_links",
    "extract_title",
    "resolve_link",
]
