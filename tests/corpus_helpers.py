from __future__ import annotations

from typing import Mapping

from docmesh.graph.model import CorpusDocument


def make_corpus(files: Mapping[str, str]) -> list[CorpusDocument]:
    return [CorpusDocument(path=path, text=text) for path, text in files.items()]
