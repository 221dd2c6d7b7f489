from __future__ import annotations

import posixpath
import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Mapping

from docmesh.classify.domain import DomainDetectionResult, PlacementCheck
from docmesh.corpus import FileReadError
from docmesh.graph.topology import TopologyReport
from docmesh.order_contract import sort_once
from docmesh.taxonomy.tiers import TIERS


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    code: str
    path: str
    message: str
    line: int | None = None

    def render(self) -> str:
        location = self.path if self.line is None else f"{self.path}:{self.line}"
        return f"{location}: {self.severity.value}[{self.code}] {self.message}"


@dataclass(frozen=True)
class DiagnosticSummary:
    diagnostics: tuple[Diagnostic, ...]

    def _count(self, severity: Severity) -> int:
        return sum(1 for item in self.diagnostics if item.severity is severity)

    @property
    def errors(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warnings(self) -> int:
        return self._count(Severity.WARNING)

    @property
    def infos(self) -> int:
        return self._count(Severity.INFO)

    def by_code(self) -> dict[str, int]:
        return dict(Counter(item.code for item in self.diagnostics))

    def headline(self) -> str:
        return f"{self.errors} error(s), {self.warnings} warning(s), {self.infos} info"


def read_error_diagnostics(errors: Iterable[FileReadError]) -> list[Diagnostic]:
    return [
        Diagnostic(Severity.ERROR, "read-error", error.path, f"could not read file: {error.error}")
        for error in errors
    ]


def topology_diagnostics(report: TopologyReport, *, hub_threshold: int) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    for link in report.broken:
        message = f"[{link.link_text}]({link.raw_target}): {link.reason}"
        if link.escapes_root:
            message += " (resolves above the corpus root)"
        found.append(
            Diagnostic(
                Severity.ERROR,
                "broken-link",
                link.source_file,
                message,
                line=link.line,
            )
        )
    for path in report.orphans:
        found.append(Diagnostic(Severity.WARNING, "orphan", path, "no inbound links"))
    for node in report.hubs:
        found.append(
            Diagnostic(
                Severity.INFO,
                "hub",
                node.path,
                f"in={node.in_degree} out={node.out_degree} (threshold {hub_threshold})",
            )
        )
    for cycle in report.cycles:
        found.append(
            Diagnostic(
                Severity.INFO,
                "cycle",
                cycle.members[0],
                "reference cycle: " + " -> ".join((*cycle.members, cycle.members[0])),
            )
        )
    return found


def placement_diagnostics(checks: Iterable[PlacementCheck]) -> list[Diagnostic]:
    return [
        Diagnostic(
            Severity.WARNING,
            "placement-mismatch",
            check.path,
            f"{check.message}; {check.suggestion}" if check.suggestion else check.message,
        )
        for check in checks
        if not check.consistent
    ]


def confidence_diagnostics(
    detections: dict[str, DomainDetectionResult],
    *,
    threshold: float,
) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    for path, detection in detections.items():
        if detection.domain is None:
            found.append(Diagnostic(Severity.INFO, "unclassified", path, "no domain signal found"))
        elif detection.confidence < threshold:
            found.append(
                Diagnostic(
                    Severity.INFO,
                    "low-confidence",
                    path,
                    f"domain '{detection.domain}' at confidence {detection.confidence:.2f}",
                )
            )
    return found


SPECIAL_FILE_STEMS = frozenset({"INDEX", "REGISTRY", "README", "CHANGELOG", "CONTRIBUTING"})

_KEBAB_CASE_RE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
_NAME_PROBLEMS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "contains uppercase letters"),
    (re.compile(r"_"), "contains underscores"),
    (re.compile(r"\s"), "contains spaces"),
    (re.compile(r"^[0-9]"), "starts with a number"),
    (re.compile(r"--"), "contains consecutive hyphens"),
)


def kebab_case(stem: str) -> str:
    split = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", stem)
    dashed = re.sub(r"[_\s]+", "-", split.lower())
    return re.sub(r"-{2,}", "-", dashed).strip("-")


def naming_diagnostics(paths: Iterable[str]) -> list[Diagnostic]:
    """Warn on markdown file names that are not kebab-case."""
    found: list[Diagnostic] = []
    for path in paths:
        stem = posixpath.basename(path)
        if stem.endswith(".md"):
            stem = stem[: -len(".md")]
        if stem in SPECIAL_FILE_STEMS or _KEBAB_CASE_RE.match(stem):
            continue
        problems = [label for pattern, label in _NAME_PROBLEMS if pattern.search(stem)]
        found.append(
            Diagnostic(
                Severity.WARNING,
                "naming-convention",
                path,
                f"file name {', '.join(problems) or 'is not kebab-case'}; "
                f"rename to {kebab_case(stem)}.md",
            )
        )
    return found


def unknown_tier_diagnostics(declared: Mapping[str, str]) -> list[Diagnostic]:
    return [
        Diagnostic(
            Severity.WARNING,
            "unknown-tier",
            path,
            f"declares unknown tier '{tier_id}'; use one of: {', '.join(TIERS)}",
        )
        for path, tier_id in declared.items()
        if tier_id not in TIERS
    ]


def size_diagnostics(
    sizes_kb: Mapping[str, float],
    declared: Mapping[str, str],
) -> list[Diagnostic]:
    """Flag documents outside the size limits of their declared tier."""
    found: list[Diagnostic] = []
    for path, tier_id in declared.items():
        if tier_id not in TIERS or path not in sizes_kb:
            continue
        low, high = TIERS[tier_id].size_limits
        size = sizes_kb[path]
        if size < low:
            advice = f"below the {tier_id} minimum of {low:g} KB; add content or merge it"
        elif size > high:
            advice = f"above the {tier_id} maximum of {high:g} KB; split it"
        else:
            continue
        found.append(Diagnostic(Severity.INFO, "size-limit", path, f"{size:.1f} KB is {advice}"))
    return found


@lru_cache(maxsize=None)
def _section_heading(section: str) -> re.Pattern[str]:
    return re.compile(rf"^#+\s*.*{re.escape(section)}", re.IGNORECASE | re.MULTILINE)


def missing_sections(body: str, tier_id: str) -> list[str]:
    return [
        section
        for section in TIERS[tier_id].required_sections
        if not _section_heading(section).search(body)
    ]


def section_diagnostics(
    bodies: Mapping[str, str],
    declared: Mapping[str, str],
) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    for path, tier_id in declared.items():
        if tier_id not in TIERS or path not in bodies:
            continue
        missing = missing_sections(bodies[path], tier_id)
        if missing:
            headings = ", ".join(f"## {section.capitalize()}" for section in missing)
            found.append(
                Diagnostic(
                    Severity.INFO,
                    "missing-sections",
                    path,
                    f"{tier_id} is missing {', '.join(missing)}; consider adding {headings}",
                )
            )
    return found


def summarize(diagnostics: Iterable[Diagnostic]) -> DiagnosticSummary:
    ordered = sort_once(
        diagnostics,
        source="diagnostics.summarize",
        key=lambda item: (_SEVERITY_RANK[item.severity], item.path, item.line or 0, item.code),
    )
    return DiagnosticSummary(diagnostics=tuple(ordered))
