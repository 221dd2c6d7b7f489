"""End-to-end corpus audit: classify, build the graph, analyse, summarise."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from docmesh.classify.domain import PlacementCheck, check_domain_placement
from docmesh.classify.policy import domain_policy_from_config, tier_policy_from_config
from docmesh.classify.tier import TierClassificationResult, classify_tier
from docmesh.config import Settings
from docmesh.corpus import Corpus
from docmesh.diagnostics import (
    DiagnosticSummary,
    confidence_diagnostics,
    naming_diagnostics,
    placement_diagnostics,
    read_error_diagnostics,
    section_diagnostics,
    size_diagnostics,
    summarize,
    topology_diagnostics,
    unknown_tier_diagnostics,
)
from docmesh.frontmatter import declared_domains, declared_tier, parse_frontmatter
from docmesh.graph.builder import build_graph
from docmesh.graph.model import LinkGraph
from docmesh.graph.topology import TopologyReport, analyze_topology

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditResult:
    corpus: Corpus
    graph: LinkGraph
    topology: TopologyReport
    summary: DiagnosticSummary
    tiers: Mapping[str, TierClassificationResult] = field(default_factory=dict)
    placements: tuple[PlacementCheck, ...] = ()


def audit_corpus(corpus: Corpus, settings: Settings | None = None) -> AuditResult:
    settings = settings or Settings()
    domain_policy = domain_policy_from_config(settings.domain_scoring)
    tier_policy = tier_policy_from_config(settings.tier_scoring)

    graph = build_graph(
        corpus.documents,
        asset_exists=corpus.asset_exists,
        max_workers=settings.graph.workers,
        domain_policy=domain_policy,
    )
    topology = analyze_topology(
        graph,
        hub_threshold=settings.graph.hub_threshold,
        structural_names=settings.graph.structural_names,
        max_cycles=settings.graph.max_cycles,
    )

    tiers: dict[str, TierClassificationResult] = {}
    placements: list[PlacementCheck] = []
    declared_tiers: dict[str, str] = {}
    bodies: dict[str, str] = {}
    sizes_kb: dict[str, float] = {}
    for document in corpus.documents:
        metadata, body = parse_frontmatter(document.text)
        tiers[document.path] = classify_tier(body, policy=tier_policy)
        bodies[document.path] = body
        sizes_kb[document.path] = len(document.text.encode("utf-8")) / 1024
        tier_id = declared_tier(metadata)
        if tier_id is not None:
            declared_tiers[document.path] = tier_id
        declared = declared_domains(metadata)
        if declared:
            placements.append(
                check_domain_placement(document.path, declared, graph.detections[document.path])
            )

    summary = summarize(
        [
            *read_error_diagnostics(corpus.errors),
            *topology_diagnostics(topology, hub_threshold=settings.graph.hub_threshold),
            *placement_diagnostics(placements),
            *naming_diagnostics(document.path for document in corpus.documents),
            *unknown_tier_diagnostics(declared_tiers),
            *size_diagnostics(sizes_kb, declared_tiers),
            *section_diagnostics(bodies, declared_tiers),
            *confidence_diagnostics(
                dict(graph.detections),
                threshold=settings.low_confidence_threshold,
            ),
        ]
    )
    logger.info("audit finished: %s", summary.headline())
    return AuditResult(
        corpus=corpus,
        graph=graph,
        topology=topology,
        summary=summary,
        tiers=tiers,
        placements=tuple(placements),
    )
