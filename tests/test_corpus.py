from __future__ import annotations

from docmesh.corpus import iter_markdown_paths, load_corpus
from docmesh.graph.builder import build_graph


def test_load_corpus_reads_markdown_with_relative_paths(write_corpus) -> None:
    root = write_corpus(
        {
            "README.md": "# Docs",
            "security/auth.md": "auth",
            "notes.txt": "not markdown",
        }
    )
    corpus = load_corpus(root)
    assert corpus.paths == ["README.md", "security/auth.md"]
    assert corpus.errors == ()


def test_ignored_directories_are_skipped(write_corpus) -> None:
    root = write_corpus(
        {
            "a.md": "",
            "node_modules/pkg/readme.md": "",
            "build/out.md": "",
        }
    )
    assert load_corpus(root).paths == ["a.md", "build/out.md"]
    names = [path.name for path in iter_markdown_paths(root, ignore_dirs=("build",))]
    assert names == ["a.md", "readme.md"]


def test_unreadable_file_is_isolated(write_corpus) -> None:
    root = write_corpus(
        {
            "good.md": "[bad](bad.md) [other](other.md)",
            "bad.md": b"\xff\xfe\xfa not utf-8",
            "other.md": "",
        }
    )
    corpus = load_corpus(root)
    assert corpus.paths == ["good.md", "other.md"]
    assert [error.path for error in corpus.errors] == ["bad.md"]
    graph = build_graph(corpus.documents, asset_exists=corpus.asset_exists)
    # The undecodable file still exists, so the link to it is not broken.
    assert graph.broken == ()
    assert [edge.target for edge in graph.edges] == ["other.md"]


def test_asset_exists_checks_the_filesystem(write_corpus) -> None:
    root = write_corpus({"a.md": "", "img/logo.png": b"\x89PNG"})
    corpus = load_corpus(root)
    assert corpus.asset_exists("img/logo.png")
    assert not corpus.asset_exists("img/missing.png")
