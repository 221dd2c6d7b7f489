from __future__ import annotations

import json

import pytest

from docmesh.audit import audit_corpus
from docmesh.corpus import load_corpus
from docmesh.exceptions import RegistryInvariantError
from docmesh.json_io import canonicalize_json, dump_json_pretty, write_json
from docmesh.report import ReportDoc, audit_payload, render_audit_report, topology_payload


def _result(write_corpus):
    root = write_corpus(
        {
            "security/auth.md": "# Auth\n[API](../api/ref.md)\n[gone](missing.md)\n",
            "api/ref.md": "# Reference\n",
        }
    )
    return audit_corpus(load_corpus(root))


def test_report_doc_emits_frontmatter_and_table() -> None:
    doc = ReportDoc("sample")
    doc.header(2, "Rows")
    doc.table(["a", "b"], [[1, 2]])
    doc.bullets([])
    text = doc.emit()
    assert text.startswith("---\ndoc_id: sample\n")
    assert "## Rows\n| a | b |\n| --- | --- |\n| 1 | 2 |\n- none\n" in text


def test_report_doc_rejects_ragged_rows() -> None:
    doc = ReportDoc("sample")
    with pytest.raises(RegistryInvariantError):
        doc.table(["a", "b"], [[1]])


def test_audit_report_sections(write_corpus) -> None:
    text = render_audit_report(_result(write_corpus))
    assert "# Documentation link report" in text
    assert "security/auth.md:3 [gone](missing.md): target does not exist" in text
    assert "| security | api | 1 |" in text
    assert "| security/auth.md | security | 1.00 |" in text


def test_topology_payload(write_corpus) -> None:
    payload = topology_payload(_result(write_corpus).topology)
    assert payload["broken"][0]["raw_target"] == "missing.md"
    assert payload["broken"][0]["escapes_root"] is False
    assert payload["cross_domain"] == [
        {
            "source": "security/auth.md",
            "target": "api/ref.md",
            "source_domain": "security",
            "target_domain": "api",
        }
    ]
    assert payload["orphans"] == ["security/auth.md"]
    assert payload["statistics"]["total_edges"] == 1


def test_audit_payload_round_trips_through_json(write_corpus, tmp_path) -> None:
    result = _result(write_corpus)
    path = write_json(tmp_path / "out" / "audit.json", audit_payload(result))
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded["summary"]["errors"] == 1
    assert list(loaded) == sorted(loaded)


def test_canonicalize_json_sorts_nested_keys() -> None:
    assert canonicalize_json({"b": 1, "a": {"d": (1, 2), "c": None}}) == {
        "a": {"c": None, "d": [1, 2]},
        "b": 1,
    }
    rendered = dump_json_pretty({"b": 1, "a": 2})
    assert rendered.index('"a"') < rendered.index('"b"')
