from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from docmesh.audit import AuditResult
from docmesh.graph.model import LinkGraph
from docmesh.graph.topology import TopologyReport
from docmesh.invariants import require
from docmesh.json_io import JSONObject


def render_report_markdown(doc_id: str, lines: Iterable[str], *, generated_by: str = "docmesh") -> str:
    frontmatter = [
        "---",
        f"doc_id: {doc_id}",
        "doc_role: report",
        f"generated_by: {generated_by}",
        "---",
        "",
    ]
    return "\n".join(frontmatter + list(lines)) + "\n"


@dataclass
class ReportDoc:
    doc_id: str
    _lines: list[str] = field(default_factory=list)

    def line(self, value: str = "") -> None:
        self._lines.append(value)

    def header(self, level: int, title: str) -> None:
        require(1 <= level <= 6, "report header level out of range", level=level)
        self._lines.append(f"{'#' * level} {title}")

    def bullets(self, items: Iterable[str], *, empty: str | None = "- none") -> None:
        added = False
        for item in items:
            self._lines.append(f"- {item}")
            added = True
        if not added and empty is not None:
            self._lines.append(empty)

    def table(self, headers: Sequence[str], rows: Iterable[Sequence[object]]) -> None:
        header_cells = [str(entry) for entry in headers]
        require(bool(header_cells), "report table requires at least one header")
        self._lines.append("| " + " | ".join(header_cells) + " |")
        self._lines.append("| " + " | ".join("---" for _ in header_cells) + " |")
        for row in rows:
            row_cells = [str(entry) for entry in row]
            require(
                len(row_cells) == len(header_cells),
                "report table row length mismatch",
                expected=len(header_cells),
                actual=len(row_cells),
            )
            self._lines.append("| " + " | ".join(row_cells) + " |")

    def emit(self) -> str:
        return render_report_markdown(self.doc_id, self._lines)


def graph_payload(graph: LinkGraph) -> JSONObject:
    return {
        "nodes": [
            {
                "path": node.path,
                "domain": node.domain,
                "title": node.title,
                "in_degree": node.in_degree,
                "out_degree": node.out_degree,
            }
            for node in graph.nodes.values()
        ],
        "edges": [
            {
                "source": edge.source,
                "target": edge.target,
                "link_text": edge.link_text,
                "line": edge.line,
            }
            for edge in graph.edges
        ],
    }


def topology_payload(report: TopologyReport) -> JSONObject:
    stats = report.statistics
    return {
        "broken": [
            {
                "source_file": link.source_file,
                "raw_target": link.raw_target,
                "line": link.line,
                "link_text": link.link_text,
                "reason": link.reason,
                "escapes_root": link.escapes_root,
            }
            for link in report.broken
        ],
        "cross_domain": [
            {
                "source": item.edge.source,
                "target": item.edge.target,
                "source_domain": item.source_domain,
                "target_domain": item.target_domain,
            }
            for item in report.cross_domain
        ],
        "orphans": list(report.orphans),
        "hubs": [
            {"path": node.path, "in_degree": node.in_degree, "out_degree": node.out_degree}
            for node in report.hubs
        ],
        "cycles": [list(cycle.members) for cycle in report.cycles],
        "matrix": {
            "domains": list(report.matrix.domains),
            "rows": [list(row) for row in report.matrix.matrix],
            "total_connections": report.matrix.total_connections,
        },
        "statistics": {
            "total_nodes": stats.total_nodes,
            "total_edges": stats.total_edges,
            "total_links": stats.total_links,
            "internal_links": stats.internal_links,
            "external_links": stats.external_links,
            "avg_in_degree": round(stats.avg_in_degree, 3),
            "avg_out_degree": round(stats.avg_out_degree, 3),
            "orphan_count": stats.orphan_count,
            "hub_count": stats.hub_count,
            "cycle_count": stats.cycle_count,
            "cross_domain_edges": stats.cross_domain_edges,
            "cross_domain_percentage": round(stats.cross_domain_percentage, 2),
            "broken_percentage": round(stats.broken_percentage, 2),
        },
    }


def audit_payload(result: AuditResult) -> JSONObject:
    summary = result.summary
    return {
        "summary": {
            "errors": summary.errors,
            "warnings": summary.warnings,
            "info": summary.infos,
            "by_code": dict(summary.by_code()),
        },
        "diagnostics": [
            {
                "severity": item.severity.value,
                "code": item.code,
                "path": item.path,
                "line": item.line,
                "message": item.message,
            }
            for item in summary.diagnostics
        ],
        "documents": [
            {
                "path": path,
                "domain": detection.domain,
                "domain_confidence": round(detection.confidence, 3),
                "tier": result.tiers[path].tier if path in result.tiers else None,
            }
            for path, detection in result.graph.detections.items()
        ],
        "graph": graph_payload(result.graph),
        "topology": topology_payload(result.topology),
    }


def render_audit_report(result: AuditResult) -> str:
    topology = result.topology
    stats = topology.statistics
    summary = result.summary
    doc = ReportDoc("docmesh_link_report")
    doc.header(1, "Documentation link report")
    doc.line()
    doc.line(f"Diagnostics: {summary.headline()}")
    doc.line()
    doc.header(2, "Statistics")
    doc.table(
        ["metric", "value"],
        [
            ["documents", stats.total_nodes],
            ["edges", stats.total_edges],
            ["internal links", stats.internal_links],
            ["external links", stats.external_links],
            ["avg in-degree", f"{stats.avg_in_degree:.2f}"],
            ["avg out-degree", f"{stats.avg_out_degree:.2f}"],
            ["cross-domain", f"{stats.cross_domain_edges} ({stats.cross_domain_percentage:.1f}%)"],
            ["broken", f"{len(topology.broken)} ({stats.broken_percentage:.1f}%)"],
        ],
    )
    doc.line()
    doc.header(2, "Broken links")
    doc.bullets(
        f"{link.source_file}:{link.line} [{link.link_text}]({link.raw_target}): {link.reason}"
        for link in topology.broken
    )
    doc.line()
    doc.header(2, "Orphans")
    doc.bullets(topology.orphans)
    doc.line()
    doc.header(2, "Hubs")
    doc.bullets(
        f"{node.path} (in={node.in_degree}, out={node.out_degree})" for node in topology.hubs
    )
    doc.line()
    doc.header(2, "Cycles")
    doc.bullets(" -> ".join(cycle.members) for cycle in topology.cycles)
    doc.line()
    doc.header(2, "Top domain connections")
    connections = stats.top_connections
    if connections:
        doc.table(
            ["from", "to", "links"],
            [[item.source, item.target, item.count] for item in connections],
        )
    else:
        doc.line("- none")
    doc.line()
    doc.header(2, "Document classification")
    doc.table(
        ["document", "domain", "confidence", "tier"],
        [
            [
                path,
                detection.domain or "-",
                f"{detection.confidence:.2f}",
                result.tiers[path].tier if path in result.tiers else "-",
            ]
            for path, detection in result.graph.detections.items()
        ],
    )
    return doc.emit()
