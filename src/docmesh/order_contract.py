from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def sort_once(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> list[T]:
    """Return ``values`` in a deterministic order.

    The sort is stable, so items with equal keys keep their caller order.
    ``source`` names the call site in debug logs.
    """
    ordered = sorted(values, key=key, reverse=reverse)  # type: ignore[arg-type]
    logger.debug("%s: ordered %d item(s)", source, len(ordered))
    return ordered
