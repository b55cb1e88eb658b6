from __future__ import annotations

import base64
import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Mapping


def _sort_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def to_jsonable(obj: Any, *, strict: bool = False) -> Any:
    """
    Convert package content to a deterministic JSON-shaped value.

    Used both for identity hashing (strict=True) and for reports.

    - dataclasses become dicts of their fields, recursively
    - sets become lists sorted by their JSON form, independent of hash seed
    - bytes are base64-encoded
    - any other object: strict raises TypeError (its str() may carry a memory
      address), non-strict falls back to str()
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj

    if isinstance(obj, Enum):
        return to_jsonable(obj.value, strict=strict)

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if isinstance(obj, Path):
        return str(obj)

    if isinstance(obj, (bytes, bytearray)):
        return {"__bytes_b64__": base64.b64encode(bytes(obj)).decode("ascii")}

    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name), strict=strict) for f in fields(obj)}

    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v, strict=strict) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [to_jsonable(x, strict=strict) for x in obj]

    if isinstance(obj, (set, frozenset)):
        return sorted((to_jsonable(x, strict=strict) for x in obj), key=_sort_key)

    if strict:
        raise TypeError(f"value of type {type(obj).__name__} has no stable JSON form")
    return str(obj)
