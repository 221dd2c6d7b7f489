from __future__ import annotations

import posixpath
from dataclasses import dataclass


@dataclass(frozen=True)
class ResolvedTarget:
    """Where a raw link target points, relative to the corpus root.

    ``path`` is ``None`` for same-file anchors. ``escapes_root`` marks targets
    that climb above the root with ``..`` and so can never name a document.
    """

    raw: str
    path: str | None
    anchor: str | None = None
    same_file: bool = False
    escapes_root: bool = False


def split_anchor(target: str) -> tuple[str, str | None]:
    path_part, sep, anchor = target.partition("#")
    return path_part, (anchor if sep else None)


def resolve_link(target: str, source_path: str) -> ResolvedTarget:
    """Resolve ``target`` as written in the document at ``source_path``.

    Both ``source_path`` and the result are root-relative POSIX paths. A
    leading ``/`` anchors the target at the corpus root; anything else is
    relative to the source document's directory.
    """
    path_part, anchor = split_anchor(target.replace("\\", "/"))
    if not path_part:
        return ResolvedTarget(raw=target, path=None, anchor=anchor, same_file=True)
    if path_part.startswith("/"):
        joined = path_part.lstrip("/")
    else:
        source_dir = posixpath.dirname(source_path.replace("\\", "/"))
        joined = posixpath.join(source_dir, path_part)
    normalized = posixpath.normpath(joined) if joined else "."
    escapes = normalized == ".." or normalized.startswith("../")
    return ResolvedTarget(
        raw=target,
        path=normalized,
        anchor=anchor,
        escapes_root=escapes,
    )
