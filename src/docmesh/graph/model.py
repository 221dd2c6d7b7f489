from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from docmesh.classify.domain import DomainDetectionResult

REASON_MISSING = "target does not exist"


@dataclass(frozen=True)
class CorpusDocument:
    """One scanned file: its root-relative POSIX path and decoded text."""

    path: str
    text: str


@dataclass(frozen=True)
class DocumentNode:
    path: str
    domain: str | None
    in_degree: int = 0
    out_degree: int = 0
    title: str | None = None

    @property
    def total_degree(self) -> int:
        return self.in_degree + self.out_degree


@dataclass(frozen=True)
class LinkEdge:
    source: str
    target: str
    link_text: str
    line: int


@dataclass(frozen=True)
class BrokenLink:
    source_file: str
    raw_target: str
    line: int
    link_text: str
    reason: str
    escapes_root: bool = False


@dataclass(frozen=True)
class ExternalLink:
    source_file: str
    url: str
    link_text: str
    line: int


@dataclass(frozen=True)
class LinkGraph:
    nodes: Mapping[str, DocumentNode]
    edges: tuple[LinkEdge, ...]
    broken: tuple[BrokenLink, ...] = ()
    external: tuple[ExternalLink, ...] = ()
    detections: Mapping[str, DomainDetectionResult] = field(default_factory=dict)
    same_file_links: int = 0
    asset_links: int = 0

    @property
    def internal_links(self) -> int:
        return len(self.edges) + len(self.broken) + self.same_file_links + self.asset_links

    @property
    def total_links(self) -> int:
        return self.internal_links + len(self.external)

    def node(self, path: str) -> DocumentNode:
        return self.nodes[path]

    def node_index(self) -> dict[str, int]:
        return {path: idx for idx, path in enumerate(self.nodes)}

    def adjacency(self) -> list[list[int]]:
        """Successor indices per node; parallel edges collapse to one entry."""
        index = self.node_index()
        successors: list[list[int]] = [[] for _ in index]
        seen: list[set[int]] = [set() for _ in index]
        for edge in self.edges:
            src = index[edge.source]
            dst = index[edge.target]
            if dst not in seen[src]:
                seen[src].add(dst)
                successors[src].append(dst)
        return successors
