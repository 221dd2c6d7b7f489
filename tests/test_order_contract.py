from __future__ import annotations

import pytest

from docmesh.exceptions import RegistryInvariantError
from docmesh.invariants import never, require
from docmesh.order_contract import sort_once


def test_sort_once_sorts() -> None:
    assert sort_once(["b", "a", "c"], source="test") == ["a", "b", "c"]
    assert sort_once(iter([1, 3, 2]), source="test", reverse=True) == [3, 2, 1]


def test_sort_once_is_stable_for_equal_keys() -> None:
    values = [("x", 1), ("y", 0), ("z", 1)]
    ordered = sort_once(values, source="test", key=lambda item: item[1])
    assert ordered == [("y", 0), ("x", 1), ("z", 1)]


def test_never_carries_env() -> None:
    with pytest.raises(RegistryInvariantError) as excinfo:
        never("bad entry", domain="api")
    assert str(excinfo.value) == "bad entry (domain='api')"


def test_require_passes_through_true_conditions() -> None:
    require(True, "unused")
    with pytest.raises(RegistryInvariantError, match="level out of range"):
        require(False, "level out of range", level=9)
