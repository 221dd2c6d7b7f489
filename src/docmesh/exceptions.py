"""Exception types raised by docmesh."""

from __future__ import annotations

from typing import Mapping


class DocmeshError(RuntimeError):
    """Base class for docmesh failures that are programmer or setup errors."""


class RegistryInvariantError(DocmeshError):
    """A static registry (domains or tiers) violates one of its invariants.

    Raised once at import time, never per classification call. The ``env``
    payload names the offending entry so the failure is actionable without a
    debugger.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.env: dict[str, object] = dict(env or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.env:
            return base
        details = ", ".join(f"{key}={value!r}" for key, value in self.env.items())
        return f"{base} ({details})"


class ConfigError(ValueError):
    """A docmesh.toml value has the wrong type or names an unknown field."""
