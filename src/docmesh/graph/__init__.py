"""Reference graph construction and topology analysis."""

from docmesh.graph.builder import build_graph
from docmesh.graph.model import (
    BrokenLink,
    CorpusDocument,
    DocumentNode,
    ExternalLink,
    LinkEdge,
    LinkGraph,
)
from docmesh.graph.topology import (
    Cycle,
    CrossDomainEdge,
    DomainConnectionMatrix,
    TopologyReport,
    analyze_topology,
)

__all__ = [
    "BrokenLink",
    "CorpusDocument",
    "CrossDomainEdge",
    "Cycle",
    "DocumentNode",
    "DomainConnectionMatrix",
    "ExternalLink",
    "LinkEdge",
    "LinkGraph",
    "TopologyReport",
    "analyze_topology",
    "build_graph",
]
