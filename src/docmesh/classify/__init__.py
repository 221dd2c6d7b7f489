"""Domain and tier classifiers."""

from docmesh.classify.domain import (
    DomainAlternate,
    DomainDetectionResult,
    PlacementCheck,
    check_domain_placement,
    classify_domain,
    classify_domain_from_content,
    classify_domain_from_path,
    suggest_domains_for_file,
)
from docmesh.classify.policy import DomainScoringPolicy, TierScoringPolicy
from docmesh.classify.tier import TierClassificationResult, classify_tier

__all__ = [
    "DomainAlternate",
    "DomainDetectionResult",
    "DomainScoringPolicy",
    "PlacementCheck",
    "TierClassificationResult",
    "TierScoringPolicy",
    "check_domain_placement",
    "classify_domain",
    "classify_domain_from_content",
    "classify_domain_from_path",
    "classify_tier",
    "suggest_domains_for_file",
]
