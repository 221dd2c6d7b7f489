"""Invariant markers for docmesh registries and renderers."""

from __future__ import annotations

from typing import NoReturn

from docmesh.exceptions import RegistryInvariantError


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path that a well-formed registry can never reach.

    The env payload is carried on the raised error for diagnosis only.
    """
    raise RegistryInvariantError(reason or "invariant violated", env=env)


def require(condition: bool, reason: str, **env: object) -> None:
    if not condition:
        never(reason, **env)

