"""Domain and tier registries."""

from docmesh.taxonomy.domains import DOMAIN_IDS, DOMAINS, Domain, get_domain, is_valid_domain
from docmesh.taxonomy.tiers import DEFAULT_TIER, TIER_IDS, TIERS, Tier, get_tier, is_valid_tier

__all__ = [
    "DEFAULT_TIER",
    "DOMAIN_IDS",
    "DOMAINS",
    "Domain",
    "TIER_IDS",
    "TIERS",
    "Tier",
    "get_domain",
    "get_tier",
    "is_valid_domain",
    "is_valid_tier",
]
