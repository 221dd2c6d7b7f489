"""Derived analyses over a finished reference graph.

Every function here is pure: it reads a :class:`LinkGraph` and returns new
records. Broken links and cycles are findings, not failures.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from docmesh.config import DEFAULT_HUB_THRESHOLD, DEFAULT_STRUCTURAL_NAMES
from docmesh.graph.model import BrokenLink, DocumentNode, LinkEdge, LinkGraph
from docmesh.order_contract import sort_once
from docmesh.taxonomy.domains import DOMAIN_IDS


@dataclass(frozen=True)
class CrossDomainEdge:
    edge: LinkEdge
    source_domain: str
    target_domain: str


@dataclass(frozen=True)
class DomainConnection:
    source: str
    target: str
    count: int


@dataclass(frozen=True)
class DomainConnectionMatrix:
    domains: tuple[str, ...]
    matrix: tuple[tuple[int, ...], ...]
    total_connections: int

    def count(self, source: str, target: str) -> int:
        return self.matrix[self.domains.index(source)][self.domains.index(target)]

    def top_connections(
        self,
        limit: int = 10,
        *,
        include_same_domain: bool = False,
    ) -> list[DomainConnection]:
        connections = [
            DomainConnection(source=src, target=dst, count=self.matrix[row][col])
            for row, src in enumerate(self.domains)
            for col, dst in enumerate(self.domains)
            if self.matrix[row][col] > 0 and (include_same_domain or row != col)
        ]
        ordered = sort_once(
            connections,
            source="topology.top_connections",
            key=lambda item: -item.count,
        )
        return ordered[:limit]


@dataclass(frozen=True)
class Cycle:
    members: tuple[str, ...]

    @property
    def key(self) -> tuple[str, ...]:
        return tuple(sorted(self.members))

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class LinkStatistics:
    total_nodes: int
    total_edges: int
    total_links: int
    internal_links: int
    external_links: int
    avg_in_degree: float
    avg_out_degree: float
    orphan_count: int
    hub_count: int
    cycle_count: int
    cross_domain_edges: int
    cross_domain_percentage: float
    broken_percentage: float
    top_connections: tuple[DomainConnection, ...] = ()


@dataclass(frozen=True)
class TopologyReport:
    broken: tuple[BrokenLink, ...]
    cross_domain: tuple[CrossDomainEdge, ...]
    orphans: tuple[str, ...]
    hubs: tuple[DocumentNode, ...]
    cycles: tuple[Cycle, ...]
    matrix: DomainConnectionMatrix
    statistics: LinkStatistics
    backlinks: Mapping[str, tuple[LinkEdge, ...]] = field(default_factory=dict)

    def backlinks_for(self, path: str) -> tuple[LinkEdge, ...]:
        return self.backlinks.get(path, ())


def cross_domain_edges(graph: LinkGraph) -> list[CrossDomainEdge]:
    found: list[CrossDomainEdge] = []
    for edge in graph.edges:
        src = graph.nodes[edge.source].domain
        dst = graph.nodes[edge.target].domain
        if src and dst and src != dst:
            found.append(CrossDomainEdge(edge=edge, source_domain=src, target_domain=dst))
    return found


def domain_connection_matrix(
    graph: LinkGraph,
    domains: Iterable[str] = DOMAIN_IDS,
) -> DomainConnectionMatrix:
    """Edge counts between classified domains, same-domain edges on the diagonal."""
    order = tuple(domains)
    position = {domain_id: idx for idx, domain_id in enumerate(order)}
    cells = [[0 for _ in order] for _ in order]
    total = 0
    for edge in graph.edges:
        src = graph.nodes[edge.source].domain
        dst = graph.nodes[edge.target].domain
        if src in position and dst in position:
            cells[position[src]][position[dst]] += 1
            total += 1
    return DomainConnectionMatrix(
        domains=order,
        matrix=tuple(tuple(row) for row in cells),
        total_connections=total,
    )


def find_orphans(
    graph: LinkGraph,
    structural_names: Iterable[str] = DEFAULT_STRUCTURAL_NAMES,
) -> list[str]:
    excluded = set(structural_names)
    return [
        node.path
        for node in graph.nodes.values()
        if node.in_degree == 0 and posixpath.basename(node.path) not in excluded
    ]


def find_hubs(graph: LinkGraph, threshold: int = DEFAULT_HUB_THRESHOLD) -> list[DocumentNode]:
    hubs = [
        node
        for node in graph.nodes.values()
        if node.in_degree >= threshold or node.out_degree >= threshold
    ]
    return sort_once(hubs, source="topology.find_hubs", key=lambda node: -node.total_degree)


def find_cycles(graph: LinkGraph, *, max_cycles: int | None = None) -> list[Cycle]:
    """Reference cycles found by depth-first search.

    The traversal keeps an explicit stack of node indices. Reaching a node
    that is still on the stack records the stack slice from that node onward.
    Rotations of one cycle share a sorted member key and are reported once.
    """
    if max_cycles is not None and max_cycles < 0:
        raise ValueError(f"max_cycles must be >= 0, got {max_cycles}")
    paths = list(graph.nodes)
    successors = graph.adjacency()
    visited = [False] * len(paths)
    stack_position = [-1] * len(paths)
    cycles: list[Cycle] = []
    seen_keys: set[tuple[str, ...]] = set()

    for start in range(len(paths)):
        if visited[start]:
            continue
        visited[start] = True
        stack = [start]
        cursors = [0]
        stack_position[start] = 0
        while stack:
            node = stack[-1]
            cursor = cursors[-1]
            if cursor >= len(successors[node]):
                stack_position[node] = -1
                stack.pop()
                cursors.pop()
                continue
            cursors[-1] = cursor + 1
            nxt = successors[node][cursor]
            if stack_position[nxt] >= 0:
                cycle = Cycle(members=tuple(paths[idx] for idx in stack[stack_position[nxt]:]))
                if cycle.key not in seen_keys:
                    seen_keys.add(cycle.key)
                    cycles.append(cycle)
            elif not visited[nxt]:
                visited[nxt] = True
                stack_position[nxt] = len(stack)
                stack.append(nxt)
                cursors.append(0)

    if max_cycles is not None:
        return cycles[:max_cycles]
    return cycles


def backlink_index(graph: LinkGraph) -> dict[str, tuple[LinkEdge, ...]]:
    inbound: dict[str, list[LinkEdge]] = {}
    for edge in graph.edges:
        inbound.setdefault(edge.target, []).append(edge)
    return {target: tuple(edges) for target, edges in inbound.items()}


def link_statistics(
    graph: LinkGraph,
    *,
    orphan_count: int,
    hub_count: int,
    cycle_count: int,
    cross_domain_count: int,
    matrix: DomainConnectionMatrix,
) -> LinkStatistics:
    node_count = len(graph.nodes)
    edge_count = len(graph.edges)
    total_in = sum(node.in_degree for node in graph.nodes.values())
    total_out = sum(node.out_degree for node in graph.nodes.values())
    internal = graph.internal_links
    return LinkStatistics(
        total_nodes=node_count,
        total_edges=edge_count,
        total_links=graph.total_links,
        internal_links=internal,
        external_links=len(graph.external),
        avg_in_degree=total_in / node_count if node_count else 0.0,
        avg_out_degree=total_out / node_count if node_count else 0.0,
        orphan_count=orphan_count,
        hub_count=hub_count,
        cycle_count=cycle_count,
        cross_domain_edges=cross_domain_count,
        cross_domain_percentage=(cross_domain_count / edge_count * 100) if edge_count else 0.0,
        broken_percentage=(len(graph.broken) / internal * 100) if internal else 0.0,
        top_connections=tuple(matrix.top_connections()),
    )


def analyze_topology(
    graph: LinkGraph,
    *,
    hub_threshold: int = DEFAULT_HUB_THRESHOLD,
    structural_names: Iterable[str] = DEFAULT_STRUCTURAL_NAMES,
    max_cycles: int | None = None,
) -> TopologyReport:
    crossings = cross_domain_edges(graph)
    matrix = domain_connection_matrix(graph)
    orphans = find_orphans(graph, structural_names)
    hubs = find_hubs(graph, hub_threshold)
    cycles = find_cycles(graph, max_cycles=max_cycles)
    return TopologyReport(
        broken=graph.broken,
        cross_domain=tuple(crossings),
        orphans=tuple(orphans),
        hubs=tuple(hubs),
        cycles=tuple(cycles),
        matrix=matrix,
        statistics=link_statistics(
            graph,
            orphan_count=len(orphans),
            hub_count=len(hubs),
            cycle_count=len(cycles),
            cross_domain_count=len(crossings),
            matrix=matrix,
        ),
        backlinks=backlink_index(graph),
    )
