"""Tunable scoring weights for the domain and tier classifiers.

The numbers are policy, not algorithm: they are kept as named fields so a
``docmesh.toml`` can adjust them and tests can pin the defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from docmesh.config import TomlTable, apply_policy_section


@dataclass(frozen=True)
class DomainScoringPolicy:
    root_confidence: float = 1.0
    depth_base: float = 0.9
    depth_step: float = 0.1
    filename_confidence: float = 0.6
    path_override_threshold: float = 0.9
    content_base: float = 0.5
    score_weight: float = 0.3
    score_scale: float = 20.0
    gap_scale: float = 10.0
    gap_cap: float = 0.3
    confidence_cap: float = 0.95
    alternate_limit: int = 3
    alternate_decay: float = 0.8


@dataclass(frozen=True)
class TierScoringPolicy:
    indicator_weight: int = 2
    heading_weight: int = 5
    size_bonus: int = 10
    indicator_trace_min: int = 3
    code_block_density: float = 0.5
    code_block_lines: int = 50
    code_block_bonus: int = 15
    list_ratio: float = 0.3
    list_guide_bonus: int = 10
    list_standard_bonus: int = 8
    table_rows: int = 5
    table_bonus: int = 15
    admonitions: int = 2
    admonition_bonus: int = 10
    confidence_base: float = 0.5
    gap_weight: float = 0.3
    magnitude_weight: float = 0.2
    magnitude_scale: float = 100.0
    confidence_cap: float = 0.95


DEFAULT_DOMAIN_POLICY = DomainScoringPolicy()
DEFAULT_TIER_POLICY = TierScoringPolicy()


def domain_policy_from_config(section: TomlTable) -> DomainScoringPolicy:
    return apply_policy_section(DEFAULT_DOMAIN_POLICY, section, section_name="domain_scoring")


def tier_policy_from_config(section: TomlTable) -> TierScoringPolicy:
    return apply_policy_section(DEFAULT_TIER_POLICY, section, section_name="tier_scoring")


@lru_cache(maxsize=None)
def word_pattern(phrase: str) -> re.Pattern[str]:
    """Case-insensitive whole-word pattern for a keyword or indicator phrase."""
    return re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE)


def count_whole_word(phrase: str, text: str) -> int:
    return sum(1 for _ in word_pattern(phrase).finditer(text))
