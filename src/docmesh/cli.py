from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from docmesh.audit import audit_corpus
from docmesh.classify.domain import classify_domain
from docmesh.classify.policy import domain_policy_from_config, tier_policy_from_config
from docmesh.classify.tier import classify_tier
from docmesh.config import Settings, load_settings
from docmesh.corpus import Corpus, load_corpus, relative_posix
from docmesh.exceptions import ConfigError
from docmesh.frontmatter import parse_frontmatter
from docmesh.graph.builder import build_graph
from docmesh.graph.topology import backlink_index
from docmesh.json_io import dump_json_pretty, write_json
from docmesh.links.extract import extract_links
from docmesh.report import audit_payload, graph_payload, render_audit_report

app = typer.Typer(add_completion=False)

_LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Classify markdown documentation and audit its link graph."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


def _settings_or_exit(
    root: Path,
    config: Path | None = None,
    **graph_overrides: object,
) -> Settings:
    try:
        settings = load_settings(root=root, config_path=config, graph_overrides=graph_overrides)
        # Policy sections are only resolved on use; surface bad keys up front.
        domain_policy_from_config(settings.domain_scoring)
        tier_policy_from_config(settings.tier_scoring)
        return settings
    except ConfigError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)


def _require_directory(root: Path) -> None:
    if not root.is_dir():
        typer.echo(f"Not a directory: {root}", err=True)
        raise typer.Exit(code=2)


def _load(root: Path, settings: Settings) -> Corpus:
    _require_directory(root)
    corpus = load_corpus(root, ignore_dirs=settings.ignore_dirs)
    for error in corpus.errors:
        typer.echo(f"warning: could not read {error.path}: {error.error}", err=True)
    return corpus


def _corpus_path(path: Path, root: Path) -> str:
    """Root-relative path when ``path`` lives under ``root``, else as given."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return path.as_posix()
    return relative_posix(path, root)


@app.command("classify")
def classify(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    root: Path = typer.Option(Path("."), "--root"),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """Classify documents by domain and tier."""
    settings = _settings_or_exit(root)
    domain_policy = domain_policy_from_config(settings.domain_scoring)
    tier_policy = tier_policy_from_config(settings.tier_scoring)
    rows: list[dict[str, object]] = []
    for path in files:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            typer.echo(f"warning: could not read {path}: {exc}", err=True)
            continue
        rel = _corpus_path(path, root)
        detection = classify_domain(rel, text, ".", policy=domain_policy)
        _, body = parse_frontmatter(text)
        tier = classify_tier(body, policy=tier_policy)
        rows.append(
            {
                "path": rel,
                "domain": detection.domain,
                "confidence": round(detection.confidence, 3),
                "method": detection.method,
                "alternates": [
                    {"domain": alt.domain, "confidence": round(alt.confidence, 3)}
                    for alt in detection.alternates
                ],
                "tier": tier.tier,
                "tier_confidence": round(tier.confidence, 3),
                "reasoning": list(tier.reasoning),
            }
        )
    if json_output:
        typer.echo(dump_json_pretty(rows))
        return
    for row in rows:
        domain = row["domain"] or "-"
        typer.echo(
            f"{row['path']}: domain={domain} ({row['confidence']:.2f}, {row['method']}) "
            f"tier={row['tier']} ({row['tier_confidence']:.2f})"
        )


@app.command("links")
def links(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """List the inline links in a single document."""
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Could not read {file}: {exc}", err=True)
        raise typer.Exit(code=2)
    found = extract_links(text)
    if json_output:
        typer.echo(
            dump_json_pretty(
                [
                    {
                        "text": link.text,
                        "target": link.target,
                        "title": link.title,
                        "internal": link.is_internal,
                        "line": link.line,
                        "start": link.start,
                        "end": link.end,
                    }
                    for link in found
                ]
            )
        )
        return
    for link in found:
        kind = "internal" if link.is_internal else "external"
        typer.echo(f"{file.as_posix()}:{link.line}: [{link.text}]({link.target}) {kind}")


@app.command("graph")
def graph(
    root: Path = typer.Option(Path("."), "--root"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """Build the reference graph for every document under --root."""
    settings = _settings_or_exit(root, workers=workers)
    corpus = _load(root, settings)
    link_graph = build_graph(
        corpus.documents,
        asset_exists=corpus.asset_exists,
        max_workers=settings.graph.workers,
        domain_policy=domain_policy_from_config(settings.domain_scoring),
    )
    if json_output:
        typer.echo(dump_json_pretty(graph_payload(link_graph)))
        return
    typer.echo(
        f"{len(link_graph.nodes)} documents, {len(link_graph.edges)} edges, "
        f"{len(link_graph.broken)} broken links, {len(link_graph.external)} external links"
    )
    for edge in link_graph.edges:
        typer.echo(f"{edge.source}:{edge.line} -> {edge.target}")


@app.command("backlinks")
def backlinks(
    file: Path = typer.Argument(...),
    root: Path = typer.Option(Path("."), "--root"),
) -> None:
    """List documents that link to FILE."""
    settings = _settings_or_exit(root)
    corpus = _load(root, settings)
    link_graph = build_graph(
        corpus.documents,
        asset_exists=corpus.asset_exists,
        max_workers=settings.graph.workers,
        domain_policy=domain_policy_from_config(settings.domain_scoring),
    )
    target = _corpus_path(file if file.is_absolute() else root / file, root)
    if target not in link_graph.nodes:
        typer.echo(f"Not a document under {root}: {file}", err=True)
        raise typer.Exit(code=2)
    inbound = backlink_index(link_graph).get(target, ())
    if not inbound:
        typer.echo(f"No documents link to {target}.")
        return
    for edge in inbound:
        typer.echo(f"{edge.source}:{edge.line} [{edge.link_text}]")


@app.command("audit")
def audit(
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    hub_threshold: Optional[int] = typer.Option(None, "--hub-threshold", min=1),
    report: Optional[Path] = typer.Option(None, "--report"),
    json_report: Optional[Path] = typer.Option(None, "--json"),
    fail_on_errors: bool = typer.Option(True, "--fail-on-errors/--no-fail-on-errors"),
) -> None:
    """Audit links, orphans, hubs, cycles and domain placement."""
    settings = _settings_or_exit(root, config, hub_threshold=hub_threshold)
    corpus = _load(root, settings)
    result = audit_corpus(corpus, settings)
    for item in result.summary.diagnostics:
        typer.echo(item.render())
    typer.echo(f"Summary: {result.summary.headline()}")
    if report is not None:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(render_audit_report(result), encoding="utf-8")
        typer.echo(f"Wrote link report: {report}")
    if json_report is not None:
        write_json(json_report, audit_payload(result))
        typer.echo(f"Wrote audit JSON: {json_report}")
    if fail_on_errors and result.summary.errors:
        raise typer.Exit(code=1)
