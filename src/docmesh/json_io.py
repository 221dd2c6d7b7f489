from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, TypeAlias

from docmesh.order_contract import sort_once

# Report payloads: str keys, values that canonicalize_json can order.
JSONObject: TypeAlias = dict[str, object]


def canonicalize_json(value: object) -> object:
    if isinstance(value, Mapping):
        normalized_items = [
            (str(key), canonicalize_json(item_value))
            for key, item_value in value.items()
        ]
        ordered_items = sort_once(
            normalized_items,
            source="json_io.canonicalize_json.mapping_items",
            key=lambda item: item[0],
        )
        return {key: item_value for key, item_value in ordered_items}
    if isinstance(value, (list, tuple)):
        return [canonicalize_json(item) for item in value]
    return value


def dump_json_pretty(payload: object) -> str:
    return json.dumps(canonicalize_json(payload), indent=2, sort_keys=False)


def write_json(path: Path, payload: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json_pretty(payload) + "\n", encoding="utf-8")
    return path
