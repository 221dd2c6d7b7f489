"""Domain classification from a document's location and text.

Two independent signals are combined. The path signal looks for a registered
domain id among the path segments (relative to the docs root) or inside the
filename. The content signal counts whole-word keyword hits per domain. A
top-level domain folder is authoritative; otherwise the stronger signal wins
and the weaker one is kept as an alternate.
"""

from __future__ import annotations

import dataclasses
import logging
import posixpath
from dataclasses import dataclass, field
from typing import Iterable, Literal, Mapping

from docmesh.classify.policy import (
    DEFAULT_DOMAIN_POLICY,
    DomainScoringPolicy,
    count_whole_word,
)
from docmesh.taxonomy.domains import DOMAINS, is_valid_domain, keyword_index

DetectionMethod = Literal["path", "keywords", "none"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainAlternate:
    domain: str
    confidence: float


@dataclass(frozen=True)
class DomainDetectionResult:
    domain: str | None
    confidence: float
    method: DetectionMethod
    alternates: tuple[DomainAlternate, ...] = ()
    scores: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PlacementCheck:
    path: str
    declared: tuple[str, ...]
    detected: str | None
    consistent: bool
    message: str = ""
    suggestion: str = ""


NO_MATCH = DomainDetectionResult(domain=None, confidence=0.0, method="none")


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


def _relative_parts(path: str, docs_root: str) -> list[str]:
    normalized = _normalize(path)
    root = _normalize(docs_root) or "."
    try:
        relative = posixpath.relpath(normalized, root)
    except ValueError:
        relative = normalized
    return relative.split("/")


def _stem(path: str) -> str:
    name = posixpath.basename(_normalize(path))
    return name[:-3] if name.endswith(".md") else name


def classify_domain_from_path(
    path: str,
    docs_root: str = ".",
    *,
    policy: DomainScoringPolicy = DEFAULT_DOMAIN_POLICY,
) -> DomainDetectionResult:
    if not path:
        return NO_MATCH
    for depth, part in enumerate(_relative_parts(path, docs_root)):
        if part and is_valid_domain(part):
            if depth == 0:
                confidence = policy.root_confidence
            else:
                confidence = policy.depth_base - depth * policy.depth_step
            return DomainDetectionResult(
                domain=part,
                confidence=max(confidence, 0.0),
                method="path",
            )
    stem = _stem(path)
    for domain_id in DOMAINS:
        if domain_id in stem:
            return DomainDetectionResult(
                domain=domain_id,
                confidence=policy.filename_confidence,
                method="path",
            )
    return NO_MATCH


def keyword_scores(content: str) -> dict[str, int]:
    """Per-domain sum of whole-word keyword occurrences, in registry order."""
    index = keyword_index()
    counts = {keyword: count_whole_word(keyword, content) for keyword in index}
    scores = {domain_id: 0 for domain_id in DOMAINS}
    for keyword, count in counts.items():
        if not count:
            continue
        for domain_id in index[keyword]:
            scores[domain_id] += count
    return scores


def classify_domain_from_content(
    content: str,
    *,
    policy: DomainScoringPolicy = DEFAULT_DOMAIN_POLICY,
) -> DomainDetectionResult:
    scores = keyword_scores(content)
    # Stable sort: equal scores keep registry order, so the first-registered
    # domain wins a tie.
    ranked = sorted(
        ((domain_id, score) for domain_id, score in scores.items() if score > 0),
        key=lambda item: -item[1],
    )
    if not ranked:
        return dataclasses.replace(NO_MATCH, scores=scores)
    top_domain, top_score = ranked[0]
    second_score = ranked[1][1] if len(ranked) > 1 else 0
    normalized = min(top_score / policy.score_scale, 1.0)
    gap_factor = min((top_score - second_score) / policy.gap_scale, policy.gap_cap)
    confidence = min(
        policy.content_base + normalized * policy.score_weight + gap_factor,
        policy.confidence_cap,
    )
    alternates = tuple(
        DomainAlternate(
            domain=domain_id,
            confidence=(score / top_score) * confidence * policy.alternate_decay,
        )
        for domain_id, score in ranked[1 : policy.alternate_limit + 1]
    )
    return DomainDetectionResult(
        domain=top_domain,
        confidence=confidence,
        method="keywords",
        alternates=alternates,
        scores=scores,
    )


def classify_domain(
    path: str,
    content: str | None = None,
    docs_root: str = ".",
    *,
    policy: DomainScoringPolicy = DEFAULT_DOMAIN_POLICY,
) -> DomainDetectionResult:
    path_result = classify_domain_from_path(path, docs_root, policy=policy)
    if path_result.domain and path_result.confidence >= policy.path_override_threshold:
        return path_result
    if not content:
        return path_result
    content_result = classify_domain_from_content(content, policy=policy)
    if path_result.domain is None:
        return content_result
    if content_result.confidence > path_result.confidence:
        logger.debug(
            "%s: keywords (%s) outweigh path (%s)",
            path,
            content_result.domain,
            path_result.domain,
        )
        return dataclasses.replace(
            content_result,
            alternates=(
                DomainAlternate(path_result.domain, path_result.confidence),
                *content_result.alternates,
            ),
        )
    alternates: tuple[DomainAlternate, ...] = ()
    if content_result.domain is not None:
        alternates = (DomainAlternate(content_result.domain, content_result.confidence),)
    return dataclasses.replace(
        path_result,
        alternates=alternates,
        scores=content_result.scores,
    )


def suggest_domains_for_file(file_name: str) -> list[str]:
    """Domains hinted at by a filename alone, strongest hints first."""
    stem = _stem(file_name).lower()
    suggestions: list[str] = []
    for domain in DOMAINS.values():
        for keyword in domain.keywords:
            if keyword.replace("-", "") in stem:
                if domain.id not in suggestions:
                    suggestions.append(domain.id)
                break
    for domain_id in DOMAINS:
        if domain_id in stem and domain_id not in suggestions:
            suggestions.insert(0, domain_id)
    return suggestions


def check_domain_placement(
    path: str,
    declared: Iterable[str],
    detection: DomainDetectionResult,
) -> PlacementCheck:
    """Compare author-declared domains with the classifier's answer.

    The declared value is never replaced; a disagreement is only reported.
    """
    declared_domains = tuple(declared)
    detected = detection.domain
    unknown = [value for value in declared_domains if not is_valid_domain(value)]
    if unknown:
        return PlacementCheck(
            path=path,
            declared=declared_domains,
            detected=detected,
            consistent=False,
            message=f"declares unknown domain(s): {', '.join(unknown)}",
            suggestion="use one of: " + ", ".join(DOMAINS),
        )
    if detected is not None and declared_domains and detected not in declared_domains:
        primary = declared_domains[0]
        return PlacementCheck(
            path=path,
            declared=declared_domains,
            detected=detected,
            consistent=False,
            message=f"declares domain '{primary}' but classifies as '{detected}'",
            suggestion=f"move to {primary}/ or update the declared domains",
        )
    return PlacementCheck(
        path=path,
        declared=declared_domains,
        detected=detected,
        consistent=True,
    )
