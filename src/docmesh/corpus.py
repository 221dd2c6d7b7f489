"""Filesystem side of a corpus scan: enumeration, reads, existence checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from docmesh.config import DEFAULT_IGNORE_DIRS
from docmesh.graph.model import CorpusDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileReadError:
    path: str
    error: str


@dataclass(frozen=True)
class Corpus:
    root: Path
    documents: tuple[CorpusDocument, ...]
    errors: tuple[FileReadError, ...] = ()
    unreadable: frozenset[str] = field(default_factory=frozenset)

    @property
    def paths(self) -> list[str]:
        return [doc.path for doc in self.documents]

    def asset_exists(self, rel_path: str) -> bool:
        """True for an existing non-document target under the root.

        Unreadable documents count as present so links to them are not
        double-reported as broken.
        """
        if rel_path in self.unreadable:
            return True
        candidate = self.root / rel_path
        try:
            return candidate.exists()
        except OSError:
            return False


def relative_posix(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def iter_markdown_paths(
    root: Path,
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
) -> Iterator[Path]:
    ignored = set(ignore_dirs)
    for path in sorted(root.rglob("*.md")):
        rel_parts = path.relative_to(root).parts
        if any(part in ignored for part in rel_parts[:-1]):
            continue
        if path.is_file():
            yield path


def read_document(path: Path, root: Path) -> CorpusDocument:
    return CorpusDocument(path=relative_posix(path, root), text=path.read_text(encoding="utf-8"))


def load_corpus(
    root: Path,
    *,
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
) -> Corpus:
    """Read every markdown file under ``root``.

    A file that cannot be read or decoded is recorded in ``errors`` and the
    scan continues with the rest of the corpus.
    """
    documents: list[CorpusDocument] = []
    errors: list[FileReadError] = []
    for path in iter_markdown_paths(root, ignore_dirs):
        try:
            documents.append(read_document(path, root))
        except (OSError, UnicodeDecodeError) as exc:
            rel = relative_posix(path, root)
            logger.warning("skipping %s: %s", rel, exc)
            errors.append(FileReadError(path=rel, error=str(exc)))
    logger.info("loaded %d documents from %s (%d unreadable)", len(documents), root, len(errors))
    return Corpus(
        root=root,
        documents=tuple(documents),
        errors=tuple(errors),
        unreadable=frozenset(error.path for error in errors),
    )
