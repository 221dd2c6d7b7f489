from __future__ import annotations

import dataclasses

import pytest

from docmesh.classify.policy import DEFAULT_TIER_POLICY
from docmesh.classify.tier import classify_tier, structure_stats

CODE_HEAVY = "\n".join(
    [
        "# Usage",
        "",
        "```python",
        "print('hi')",
        "```",
        "",
        "```python",
        "print('bye')",
        "```",
        "",
    ]
)

TABLE_HEAVY = "\n".join(
    ["| key | value |", "| --- | --- |"] + [f"| k{idx} | v{idx} |" for idx in range(5)]
)


def test_empty_content_falls_back_to_guide() -> None:
    result = classify_tier("")
    assert result.tier == "guide"
    assert result.confidence == 0.5
    assert all(score == 0 for score in result.scores.values())


def test_code_blocks_suggest_example() -> None:
    result = classify_tier(CODE_HEAVY)
    assert result.tier == "example"
    assert result.scores["example"] == 20
    assert "High code block ratio suggests example" in result.reasoning
    assert result.confidence == pytest.approx(0.5 + 0.3 + 0.04)


def test_tables_suggest_reference() -> None:
    result = classify_tier(TABLE_HEAVY)
    assert result.tier == "reference"
    assert "Multiple tables suggest reference" in result.reasoning


def test_admonitions_suggest_admin() -> None:
    text = "\n".join(["> **Warning** keep backups"] * 3)
    result = classify_tier(text)
    assert result.scores["admin"] >= 10
    assert "Warning boxes suggest admin documentation" in result.reasoning


def test_list_ratio_boosts_guide_and_standard() -> None:
    text = "\n".join(["- first", "- second", "- third"])
    result = classify_tier(text)
    assert result.scores["guide"] == 10
    assert result.scores["standard"] == 8
    assert result.tier == "guide"


def test_heading_patterns_score_five_each() -> None:
    result = classify_tier("## Rules\n\n## Naming\n")
    assert result.scores["standard"] == 10
    assert result.tier == "standard"
    assert "Matched heading pattern for standard: 1 matches" in result.reasoning


def test_repeated_indicator_is_traced() -> None:
    result = classify_tier("you must, you must, you must")
    assert result.scores["standard"] == 6
    assert 'Found indicator "must" 3 times (standard)' in result.reasoning


def test_size_range_bonus() -> None:
    text = "x" * (4 * 1024)
    result = classify_tier(text)
    assert result.scores["example"] == 10
    assert "Size 4.0KB matches example range" in result.reasoning


def test_tier_classification_is_deterministic() -> None:
    assert classify_tier(CODE_HEAVY) == classify_tier(CODE_HEAVY)


def test_structure_stats() -> None:
    stats = structure_stats(CODE_HEAVY)
    assert stats.lines == 10
    assert stats.code_blocks == 2
    assert stats.table_rows == 0
    assert structure_stats(TABLE_HEAVY).table_rows == 7


def test_policy_weights_are_respected() -> None:
    policy = dataclasses.replace(DEFAULT_TIER_POLICY, code_block_bonus=0)
    result = classify_tier(CODE_HEAVY, policy=policy)
    assert result.scores["example"] == 5
