from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from docmesh import cli

CORPUS = {
    "README.md": "# Docs\n[auth](security/auth.md)\n",
    "security/auth.md": "# Auth\nauthentication OAuth2 JWT token\n[API](../api/ref.md)\n",
    "api/ref.md": "# Reference\n",
}


def _invoke(args: list[str]):
    return CliRunner().invoke(cli.app, args)


def test_cli_help_lists_commands() -> None:
    result = _invoke(["--help"])
    assert result.exit_code == 0
    for name in ("classify", "links", "graph", "backlinks", "audit"):
        assert name in result.output


def test_classify_reports_domain_and_tier(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(["classify", str(root / "security/auth.md"), "--root", str(root)])
    assert result.exit_code == 0
    assert "security/auth.md: domain=security (1.00, path)" in result.output


def test_classify_json(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(
        ["classify", str(root / "api/ref.md"), "--root", str(root), "--json"]
    )
    assert result.exit_code == 0
    (row,) = json.loads(result.output)
    assert row["domain"] == "api"
    assert row["method"] == "path"


def test_classify_skips_unreadable_file_and_continues(write_corpus) -> None:
    root = write_corpus({**CORPUS, "bad.md": b"\xff\xfe\xfa"})
    result = _invoke(
        ["classify", str(root / "bad.md"), str(root / "security/auth.md"), "--root", str(root)]
    )
    assert result.exit_code == 0
    assert "could not read" in result.output
    assert "security/auth.md: domain=security" in result.output


def test_links_unreadable_file_exits_two(write_corpus) -> None:
    root = write_corpus({"bad.md": b"\xff\xfe\xfa"})
    result = _invoke(["links", str(root / "bad.md")])
    assert result.exit_code == 2
    assert "Traceback" not in result.output


def test_links_json(write_corpus) -> None:
    root = write_corpus({"a.md": 'x\n[b](b.md "Bee") [w](https://example.com)\n'})
    result = _invoke(["links", str(root / "a.md"), "--json"])
    assert result.exit_code == 0
    links = json.loads(result.output)
    assert [(item["target"], item["internal"], item["line"]) for item in links] == [
        ("b.md", True, 2),
        ("https://example.com", False, 2),
    ]
    assert links[0]["title"] == "Bee"


def test_graph_json(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(["graph", "--root", str(root), "--workers", "2", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert len(payload["nodes"]) == 3
    assert {(edge["source"], edge["target"]) for edge in payload["edges"]} == {
        ("README.md", "security/auth.md"),
        ("security/auth.md", "api/ref.md"),
    }


def test_graph_text_summary(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(["graph", "--root", str(root)])
    assert result.exit_code == 0
    assert "3 documents, 2 edges, 0 broken links" in result.output


def test_backlinks(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(["backlinks", "api/ref.md", "--root", str(root)])
    assert result.exit_code == 0
    assert "security/auth.md:3 [API]" in result.output


def test_backlinks_unknown_document(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(["backlinks", "nope.md", "--root", str(root)])
    assert result.exit_code == 2


def test_audit_clean_corpus_exits_zero(write_corpus) -> None:
    root = write_corpus(CORPUS)
    result = _invoke(["audit", "--root", str(root)])
    assert result.exit_code == 0
    assert "Summary: 0 error(s)" in result.output


def test_audit_fails_on_broken_links(write_corpus) -> None:
    root = write_corpus({**CORPUS, "api/ref.md": "[gone](missing.md)\n"})
    result = _invoke(["audit", "--root", str(root)])
    assert result.exit_code == 1
    assert "error[broken-link]" in result.output
    relaxed = _invoke(["audit", "--root", str(root), "--no-fail-on-errors"])
    assert relaxed.exit_code == 0


def test_audit_writes_reports(write_corpus, tmp_path: Path) -> None:
    root = write_corpus(CORPUS)
    report = tmp_path / "out" / "links.md"
    json_path = tmp_path / "out" / "audit.json"
    result = _invoke(
        [
            "--verbose",
            "audit",
            "--root",
            str(root),
            "--report",
            str(report),
            "--json",
            str(json_path),
            "--hub-threshold",
            "1",
        ]
    )
    assert result.exit_code == 0
    assert "# Documentation link report" in report.read_text(encoding="utf-8")
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["summary"]["errors"] == 0
    assert payload["summary"]["by_code"]["hub"] == 3


def test_audit_rejects_invalid_config(write_corpus) -> None:
    root = write_corpus({**CORPUS, "docmesh.toml": "[tier_scoring]\nbogus = 1\n"})
    result = _invoke(["audit", "--root", str(root)])
    assert result.exit_code == 2
