from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from docmesh.classify.policy import (
    DEFAULT_TIER_POLICY,
    TierScoringPolicy,
    count_whole_word,
)
from docmesh.taxonomy.tiers import DEFAULT_TIER, TIERS

_LIST_ITEM_RE = re.compile(r"^[\s]*[-*\d.]+\s", re.MULTILINE)
_TABLE_ROW_RE = re.compile(r"^\|.*\|$", re.MULTILINE)
_ADMONITION_RE = re.compile(r">\s*\*\*(warning|note|caution|important)", re.IGNORECASE)


@dataclass(frozen=True)
class TierClassificationResult:
    tier: str
    confidence: float
    scores: Mapping[str, float]
    reasoning: tuple[str, ...]


@dataclass(frozen=True)
class StructureStats:
    size_kb: float
    lines: int
    code_blocks: float
    list_items: int
    table_rows: int
    admonitions: int

    @property
    def list_ratio(self) -> float:
        return self.list_items / self.lines


def structure_stats(content: str) -> StructureStats:
    return StructureStats(
        size_kb=len(content.encode("utf-8")) / 1024,
        lines=len(content.split("\n")),
        code_blocks=content.count("```") / 2,
        list_items=len(_LIST_ITEM_RE.findall(content)),
        table_rows=len(_TABLE_ROW_RE.findall(content)),
        admonitions=len(_ADMONITION_RE.findall(content)),
    )


def classify_tier(
    content: str,
    *,
    policy: TierScoringPolicy = DEFAULT_TIER_POLICY,
) -> TierClassificationResult:
    scores: dict[str, float] = {tier_id: 0 for tier_id in TIERS}
    reasoning: list[str] = []
    stats = structure_stats(content)

    for tier in TIERS.values():
        for indicator in tier.indicators:
            hits = count_whole_word(indicator, content)
            if hits:
                scores[tier.id] += hits * policy.indicator_weight
                if hits >= policy.indicator_trace_min:
                    reasoning.append(f'Found indicator "{indicator}" {hits} times ({tier.id})')
        for pattern in tier.heading_patterns:
            hits = len(pattern.findall(content))
            if hits:
                scores[tier.id] += hits * policy.heading_weight
                reasoning.append(f"Matched heading pattern for {tier.id}: {hits} matches")
        if tier.min_kb <= stats.size_kb <= tier.max_kb:
            scores[tier.id] += policy.size_bonus
            reasoning.append(f"Size {stats.size_kb:.1f}KB matches {tier.id} range")

    code_density = stats.code_blocks / (stats.lines / policy.code_block_lines)
    if code_density > policy.code_block_density:
        scores["example"] += policy.code_block_bonus
        reasoning.append("High code block ratio suggests example")
    if stats.list_ratio > policy.list_ratio:
        scores["guide"] += policy.list_guide_bonus
        scores["standard"] += policy.list_standard_bonus
        reasoning.append("High list ratio suggests guide or standard")
    if stats.table_rows > policy.table_rows:
        scores["reference"] += policy.table_bonus
        reasoning.append("Multiple tables suggest reference")
    if stats.admonitions > policy.admonitions:
        scores["admin"] += policy.admonition_bonus
        reasoning.append("Warning boxes suggest admin documentation")

    # Strictly-greater scan from the default tier: ties and all-zero scores
    # resolve to the earliest registered tier.
    winner = DEFAULT_TIER
    best = 0.0
    for tier_id in TIERS:
        if scores[tier_id] > best:
            best = scores[tier_id]
            winner = tier_id

    ordered = sorted(scores.values(), reverse=True)
    top = ordered[0] if ordered else 0
    second = ordered[1] if len(ordered) > 1 else 0
    confidence = policy.confidence_base
    if top > 0:
        confidence = min(
            policy.confidence_base
            + ((top - second) / top) * policy.gap_weight
            + (top / policy.magnitude_scale) * policy.magnitude_weight,
            policy.confidence_cap,
        )
    return TierClassificationResult(
        tier=winner,
        confidence=confidence,
        scores=scores,
        reasoning=tuple(reasoning),
    )
