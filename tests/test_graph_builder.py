from __future__ import annotations

from collections import Counter

import pytest

from docmesh.graph.builder import build_graph, scan_document
from docmesh.graph.model import REASON_MISSING, CorpusDocument
from docmesh.graph.topology import analyze_topology
from tests.corpus_helpers import make_corpus

AUTH_SCENARIO = {
    "security/auth.md": "# Auth\nauthentication OAuth2 JWT token\n[API](../api/ref.md)\n",
    "api/ref.md": "# Reference\n",
}


def test_cross_domain_scenario() -> None:
    graph = build_graph(make_corpus(AUTH_SCENARIO))
    assert graph.nodes["security/auth.md"].domain == "security"
    assert graph.detections["security/auth.md"].confidence == 1.0
    assert len(graph.edges) == 1
    edge = graph.edges[0]
    assert (edge.source, edge.target, edge.link_text, edge.line) == (
        "security/auth.md",
        "api/ref.md",
        "API",
        3,
    )
    assert graph.broken == ()
    report = analyze_topology(graph)
    assert len(report.cross_domain) == 1
    crossing = report.cross_domain[0]
    assert (crossing.source_domain, crossing.target_domain) == ("security", "api")


def test_degrees_and_titles() -> None:
    graph = build_graph(make_corpus(AUTH_SCENARIO))
    auth = graph.node("security/auth.md")
    ref = graph.node("api/ref.md")
    assert (auth.out_degree, auth.in_degree) == (1, 0)
    assert (ref.out_degree, ref.in_degree) == (0, 1)
    assert auth.title == "Auth"


def test_forward_references_are_not_broken() -> None:
    corpus = make_corpus(
        {
            "a.md": "[z](z.md)",
            "m.md": "[a](a.md)",
            "z.md": "[m](m.md)",
        }
    )
    graph = build_graph(corpus)
    assert graph.broken == ()
    assert len(graph.edges) == 3


def test_missing_target_is_reported_with_raw_target() -> None:
    graph = build_graph(make_corpus({"a.md": "x\n[gone](./missing.md#top)"}))
    assert graph.edges == ()
    (broken,) = graph.broken
    assert broken.source_file == "a.md"
    assert broken.raw_target == "./missing.md#top"
    assert broken.line == 2
    assert broken.reason == REASON_MISSING


def test_target_above_root_is_broken_and_flagged() -> None:
    graph = build_graph(make_corpus({"a.md": "[up](../a.md)"}))
    (broken,) = graph.broken
    assert broken.reason == REASON_MISSING
    assert broken.escapes_root


def test_root_level_link_to_missing_parent_dir() -> None:
    graph = build_graph(make_corpus({"README.md": "[m](../missing/file.md)"}))
    (broken,) = graph.broken
    assert broken.raw_target == "../missing/file.md"
    assert broken.reason == "target does not exist"
    assert broken.escapes_root
    local = build_graph(make_corpus({"README.md": "[m](missing/file.md)"}))
    assert not local.broken[0].escapes_root


def test_external_and_anchor_links_make_no_edges() -> None:
    text = "[site](https://example.com) [mail](mailto:a@b.c) [top](#top)"
    graph = build_graph(make_corpus({"a.md": text}))
    assert graph.edges == ()
    assert graph.broken == ()
    assert [link.url for link in graph.external] == ["https://example.com", "mailto:a@b.c"]
    assert graph.same_file_links == 1


def test_asset_links_are_neither_edges_nor_broken() -> None:
    corpus = make_corpus({"a.md": "![logo](img/logo.png) [missing](img/none.png)"})
    graph = build_graph(corpus, asset_exists=lambda path: path == "img/logo.png")
    assert graph.asset_links == 1
    assert [link.raw_target for link in graph.broken] == ["img/none.png"]


def test_build_is_deterministic() -> None:
    corpus = make_corpus(
        {
            "a.md": "[b](b.md) [c](c.md)",
            "b.md": "[a](a.md)",
            "c.md": "[b](b.md) [nope](nope.md)",
        }
    )
    first = build_graph(corpus)
    second = build_graph(corpus)
    assert list(first.nodes) == list(second.nodes)
    assert Counter(first.edges) == Counter(second.edges)
    assert first.broken == second.broken


def test_parallel_scan_matches_serial_scan() -> None:
    corpus = make_corpus({f"doc{idx}.md": f"[next](doc{idx + 1}.md)" for idx in range(20)})
    serial = build_graph(corpus)
    parallel = build_graph(corpus, max_workers=4)
    assert parallel.edges == serial.edges
    assert parallel.nodes == serial.nodes
    assert [link.raw_target for link in parallel.broken] == ["doc20.md"]


def test_duplicate_paths_are_rejected() -> None:
    corpus = [CorpusDocument("a.md", ""), CorpusDocument("a.md", "again")]
    with pytest.raises(ValueError):
        build_graph(corpus)


def test_scan_document_classifies_and_extracts() -> None:
    scanned = scan_document(CorpusDocument("security/auth.md", AUTH_SCENARIO["security/auth.md"]))
    assert scanned.detection.domain == "security"
    assert scanned.title == "Auth"
    assert [link.target for link in scanned.links] == ["../api/ref.md"]


def test_link_counters() -> None:
    text = "[b](b.md) [x](x.md) [top](#top) [web](https://example.com)"
    graph = build_graph(make_corpus({"a.md": text, "b.md": ""}))
    assert graph.internal_links == 3
    assert graph.total_links == 4
