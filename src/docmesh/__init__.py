"""docmesh package root."""

from docmesh.classify.domain import classify_domain
from docmesh.classify.tier import classify_tier
from docmesh.graph.builder import build_graph
from docmesh.graph.topology import analyze_topology
from docmesh.links.extract import extract_links

__all__ = [
    "__version__",
    "analyze_topology",
    "build_graph",
    "classify_domain",
    "classify_tier",
    "extract_links",
]

__version__ = "0.1.0"
