from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias, TypeVar
import tomllib

from docmesh.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "docmesh.toml"
DEFAULT_STRUCTURAL_NAMES: tuple[str, ...] = ("INDEX.md", "REGISTRY.md", "README.md")
DEFAULT_IGNORE_DIRS: tuple[str, ...] = (".git", "node_modules", "dist")
DEFAULT_HUB_THRESHOLD = 5
DEFAULT_LOW_CONFIDENCE_THRESHOLD = 0.5

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]

PolicyT = TypeVar("PolicyT")

logger = logging.getLogger(__name__)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        logger.warning("could not read %s: %s", path, exc)
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("ignoring malformed %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def _name_tuple(value: TomlValue, *, field_name: str) -> tuple[str, ...]:
    """Names from a list or a comma-separated string, deduplicated in order."""
    if isinstance(value, str):
        raw = [value]
    elif isinstance(value, list):
        raw = value
    else:
        raise ConfigError(f"{field_name}: expected a list of names, got {value!r}")
    names: dict[str, None] = {}
    for entry in raw:
        if not isinstance(entry, str):
            raise ConfigError(f"{field_name}: expected a name, got {entry!r}")
        for part in entry.split(","):
            if part.strip():
                names[part.strip()] = None
    return tuple(names)


def _as_int(value: TomlValue, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{field_name}: expected int, got {value!r}")
    return value


def _as_float(value: TomlValue, *, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{field_name}: expected number, got {value!r}")
    return float(value)


def apply_policy_section(policy: PolicyT, section: TomlTable, *, section_name: str) -> PolicyT:
    """Return ``policy`` with fields overridden by a config section.

    Every key must name a field of the policy dataclass. Numeric fields keep
    their declared kind: int fields reject floats, float fields accept ints.
    """
    if not section:
        return policy
    fields = {item.name: item for item in dataclasses.fields(policy)}  # type: ignore[arg-type]
    overrides: dict[str, object] = {}
    for key, value in section.items():
        if key not in fields:
            raise ConfigError(f"[{section_name}] unknown field {key!r}")
        current = getattr(policy, key)
        label = f"[{section_name}] {key}"
        if isinstance(current, int) and not isinstance(current, bool):
            overrides[key] = _as_int(value, field_name=label)
        else:
            overrides[key] = _as_float(value, field_name=label)
    return dataclasses.replace(policy, **overrides)  # type: ignore[type-var]


@dataclass(frozen=True)
class GraphSettings:
    hub_threshold: int = DEFAULT_HUB_THRESHOLD
    structural_names: tuple[str, ...] = DEFAULT_STRUCTURAL_NAMES
    max_cycles: int | None = None
    workers: int | None = None


@dataclass(frozen=True)
class Settings:
    """Resolved docmesh.toml contents with defaults filled in."""

    domain_scoring: TomlTable = field(default_factory=dict)
    tier_scoring: TomlTable = field(default_factory=dict)
    graph: GraphSettings = field(default_factory=GraphSettings)
    ignore_dirs: tuple[str, ...] = DEFAULT_IGNORE_DIRS
    low_confidence_threshold: float = DEFAULT_LOW_CONFIDENCE_THRESHOLD


def graph_settings(section: TomlTable) -> GraphSettings:
    hub_threshold = DEFAULT_HUB_THRESHOLD
    if "hub_threshold" in section:
        hub_threshold = _as_int(section["hub_threshold"], field_name="[graph] hub_threshold")
        if hub_threshold < 1:
            raise ConfigError("[graph] hub_threshold must be >= 1")
    structural = DEFAULT_STRUCTURAL_NAMES
    if "structural_names" in section:
        structural = _name_tuple(
            section["structural_names"], field_name="[graph] structural_names"
        )
    max_cycles = None
    if "max_cycles" in section:
        max_cycles = _as_int(section["max_cycles"], field_name="[graph] max_cycles")
        if max_cycles < 0:
            raise ConfigError("[graph] max_cycles must be >= 0")
    workers = None
    if "workers" in section:
        workers = _as_int(section["workers"], field_name="[graph] workers")
    return GraphSettings(
        hub_threshold=hub_threshold,
        structural_names=structural,
        max_cycles=max_cycles,
        workers=workers,
    )


def load_settings(
    root: Path | None = None,
    config_path: Path | None = None,
    *,
    graph_overrides: TomlTable | None = None,
) -> Settings:
    """Resolve settings from docmesh.toml.

    ``graph_overrides`` (typically CLI flags) win over the ``[graph]`` section;
    ``None`` values are ignored.
    """
    data = load_config(root=root, config_path=config_path)
    graph = dict(_section(data, "graph"))
    for key, value in (graph_overrides or {}).items():
        if value is not None:
            graph[key] = value
    corpus = _section(data, "corpus")
    diagnostics = _section(data, "diagnostics")
    ignore_dirs = DEFAULT_IGNORE_DIRS
    if "ignore_dirs" in corpus:
        ignore_dirs = _name_tuple(corpus["ignore_dirs"], field_name="[corpus] ignore_dirs")
    threshold = DEFAULT_LOW_CONFIDENCE_THRESHOLD
    if "low_confidence_threshold" in diagnostics:
        threshold = _as_float(
            diagnostics["low_confidence_threshold"],
            field_name="[diagnostics] low_confidence_threshold",
        )
    return Settings(
        domain_scoring=_section(data, "domain_scoring"),
        tier_scoring=_section(data, "tier_scoring"),
        graph=graph_settings(graph),
        ignore_dirs=ignore_dirs,
        low_confidence_threshold=threshold,
    )

