"""Static catalog of structural document tiers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from docmesh.invariants import require

_HEADING_FLAGS = re.IGNORECASE | re.MULTILINE


@dataclass(frozen=True)
class Tier:
    id: str
    name: str
    description: str
    indicators: tuple[str, ...]
    heading_patterns: tuple[re.Pattern[str], ...]
    size_range: tuple[float, float]
    # Audit bounds, wider than the scoring range.
    size_limits: tuple[float, float]
    required_sections: tuple[str, ...]

    @property
    def min_kb(self) -> float:
        return self.size_range[0]

    @property
    def max_kb(self) -> float:
        return self.size_range[1]


def _headings(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, _HEADING_FLAGS) for pattern in patterns)


_TIER_TABLE: tuple[Tier, ...] = (
    Tier(
        id="guide",
        name="Guide",
        description="Step-by-step how-to guides",
        indicators=(
            "how to", "step by step", "tutorial", "guide", "walkthrough",
            "getting started", "learn", "implement", "build", "create",
        ),
        heading_patterns=_headings(
            r"^#+\s*(prerequisites?|requirements?)",
            r"^#+\s*(step\s*\d+|first|next|then|finally)",
            r"^#+\s*(overview|introduction|getting started)",
            r"^#+\s*(example|demo|try it)",
        ),
        size_range=(15, 30),
        size_limits=(1, 50),
        required_sections=("overview", "prerequisites", "steps"),
    ),
    Tier(
        id="standard",
        name="Standard",
        description="Coding standards and conventions",
        indicators=(
            "standard", "convention", "rule", "must", "should", "must not",
            "should not", "required", "recommended", "best practice", "guideline",
        ),
        heading_patterns=_headings(
            r"^#+\s*(rules?|guidelines?|conventions?)",
            r"^#+\s*(do|don'?t|avoid|prefer)",
            r"^#+\s*(naming|formatting|style)",
            r"^#+\s*(required|recommended|optional)",
        ),
        size_range=(5, 15),
        size_limits=(1, 30),
        required_sections=("rules", "examples"),
    ),
    Tier(
        id="example",
        name="Example",
        description="Code examples and templates",
        indicators=(
            "example", "sample", "template", "snippet", "code", "demo",
            "showcase", "pattern example", "usage example",
        ),
        heading_patterns=_headings(
            r"^#+\s*(example|sample|template)",
            r"^#+\s*(code|snippet|usage)",
            r"^#+\s*(input|output|result)",
        ),
        size_range=(3, 10),
        size_limits=(0.5, 20),
        required_sections=("code", "explanation"),
    ),
    Tier(
        id="reference",
        name="Reference",
        description="Comprehensive references",
        indicators=(
            "reference", "specification", "api", "complete", "comprehensive",
            "all", "full list", "documentation", "schema", "interface",
        ),
        heading_patterns=_headings(
            r"^#+\s*(api|schema|interface|type)",
            r"^#+\s*(parameters?|arguments?|options?)",
            r"^#+\s*(methods?|functions?|endpoints?)",
            r"^#+\s*(properties|fields|attributes)",
        ),
        size_range=(30, 100),
        size_limits=(5, 100),
        required_sections=("api", "parameters"),
    ),
    Tier(
        id="admin",
        name="Admin",
        description="Administrative/operational docs",
        indicators=(
            "admin", "administrative", "operational", "maintenance", "ops",
            "manage", "configure", "setup", "deployment", "monitoring",
        ),
        heading_patterns=_headings(
            r"^#+\s*(configuration|setup|installation)",
            r"^#+\s*(maintenance|monitoring|logging)",
            r"^#+\s*(backup|restore|recovery)",
            r"^#+\s*(troubleshooting|debugging)",
        ),
        size_range=(10, 20),
        size_limits=(1, 40),
        required_sections=("configuration", "procedures"),
    ),
)

DEFAULT_TIER = "guide"


def validate_tier_table(table: tuple[Tier, ...]) -> Mapping[str, Tier]:
    seen: dict[str, Tier] = {}
    for tier in table:
        require(tier.id not in seen, "duplicate tier id", tier=tier.id)
        require(bool(tier.indicators), "tier has no indicators", tier=tier.id)
        require(bool(tier.heading_patterns), "tier has no heading patterns", tier=tier.id)
        low, high = tier.size_range
        require(0 <= low <= high, "tier size range is inverted", tier=tier.id, size_range=tier.size_range)
        low, high = tier.size_limits
        require(
            0 <= low <= high,
            "tier size limits are inverted",
            tier=tier.id,
            size_limits=tier.size_limits,
        )
        seen[tier.id] = tier
    require(DEFAULT_TIER in seen, "default tier is not registered", tier=DEFAULT_TIER)
    return MappingProxyType(seen)


TIERS: Mapping[str, Tier] = validate_tier_table(_TIER_TABLE)
TIER_IDS: tuple[str, ...] = tuple(TIERS)


def get_tier(tier_id: str) -> Tier:
    return TIERS[tier_id]


def is_valid_tier(value: str) -> bool:
    return value in TIERS


def tier_display_name(tier_id: str) -> str:
    return TIERS[tier_id].name
