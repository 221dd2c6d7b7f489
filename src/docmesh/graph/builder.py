"""Two-pass reference graph construction.

Pass one is file-local (domain classification, title and link extraction) and
may run on a thread pool. Pass two resolves links against the complete node
set, so a document linked before it was itself scanned is never reported as
a broken target.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable

from docmesh.classify.domain import DomainDetectionResult, classify_domain
from docmesh.classify.policy import DEFAULT_DOMAIN_POLICY, DomainScoringPolicy
from docmesh.graph.model import (
    REASON_MISSING,
    BrokenLink,
    CorpusDocument,
    DocumentNode,
    ExternalLink,
    LinkEdge,
    LinkGraph,
)
from docmesh.links.extract import MarkdownLink, extract_links, extract_title
from docmesh.links.resolve import resolve_link

logger = logging.getLogger(__name__)

AssetCheck = Callable[[str], bool]


@dataclass(frozen=True)
class ScannedDocument:
    path: str
    detection: DomainDetectionResult
    title: str | None
    links: tuple[MarkdownLink, ...]


def scan_document(
    document: CorpusDocument,
    *,
    policy: DomainScoringPolicy = DEFAULT_DOMAIN_POLICY,
) -> ScannedDocument:
    # Corpus paths are already root-relative, so the root is ".".
    detection = classify_domain(document.path, document.text, ".", policy=policy)
    return ScannedDocument(
        path=document.path,
        detection=detection,
        title=extract_title(document.text),
        links=tuple(extract_links(document.text)),
    )


def _scan_all(
    documents: list[CorpusDocument],
    *,
    policy: DomainScoringPolicy,
    max_workers: int | None,
) -> list[ScannedDocument]:
    if max_workers is None or max_workers <= 1 or len(documents) <= 1:
        return [scan_document(document, policy=policy) for document in documents]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # map() yields in submission order; list() is the barrier.
        return list(executor.map(lambda doc: scan_document(doc, policy=policy), documents))


def _require_unique_paths(documents: list[CorpusDocument]) -> None:
    seen: set[str] = set()
    for document in documents:
        if document.path in seen:
            raise ValueError(f"corpus lists {document.path!r} more than once")
        seen.add(document.path)


def build_graph(
    corpus: Iterable[CorpusDocument],
    *,
    asset_exists: AssetCheck | None = None,
    max_workers: int | None = None,
    domain_policy: DomainScoringPolicy = DEFAULT_DOMAIN_POLICY,
) -> LinkGraph:
    """Build the reference graph for ``corpus``.

    ``asset_exists`` answers for targets that are not corpus documents (images
    and other attachments); links to such targets are counted but produce no
    edge and are not broken.
    """
    documents = list(corpus)
    _require_unique_paths(documents)
    scanned = _scan_all(documents, policy=domain_policy, max_workers=max_workers)

    known = {doc.path for doc in scanned}
    in_degree = {path: 0 for path in known}
    out_degree = {path: 0 for path in known}
    edges: list[LinkEdge] = []
    broken: list[BrokenLink] = []
    external: list[ExternalLink] = []
    same_file = 0
    assets = 0

    for doc in scanned:
        for link in doc.links:
            if link.target.startswith("#"):
                same_file += 1
                continue
            if not link.is_internal:
                external.append(
                    ExternalLink(
                        source_file=doc.path,
                        url=link.target,
                        link_text=link.text,
                        line=link.line,
                    )
                )
                continue
            resolved = resolve_link(link.target, doc.path)
            if resolved.same_file:
                same_file += 1
                continue
            target = resolved.path
            if target in known and not resolved.escapes_root:
                edges.append(
                    LinkEdge(
                        source=doc.path,
                        target=target,
                        link_text=link.text,
                        line=link.line,
                    )
                )
                out_degree[doc.path] += 1
                in_degree[target] += 1
                continue
            if (
                target is not None
                and not resolved.escapes_root
                and asset_exists is not None
                and asset_exists(target)
            ):
                assets += 1
                continue
            logger.debug(
                "%s:%d: broken link %r (escapes root: %s)",
                doc.path,
                link.line,
                link.target,
                resolved.escapes_root,
            )
            broken.append(
                BrokenLink(
                    source_file=doc.path,
                    raw_target=link.target,
                    line=link.line,
                    link_text=link.text,
                    reason=REASON_MISSING,
                    escapes_root=resolved.escapes_root,
                )
            )

    nodes = {
        doc.path: DocumentNode(
            path=doc.path,
            domain=doc.detection.domain,
            in_degree=in_degree[doc.path],
            out_degree=out_degree[doc.path],
            title=doc.title,
        )
        for doc in scanned
    }
    logger.info(
        "graph built: %d nodes, %d edges, %d broken links",
        len(nodes),
        len(edges),
        len(broken),
    )
    return LinkGraph(
        nodes=nodes,
        edges=tuple(edges),
        broken=tuple(broken),
        external=tuple(external),
        detections={doc.path: doc.detection for doc in scanned},
        same_file_links=same_file,
        asset_links=assets,
    )
