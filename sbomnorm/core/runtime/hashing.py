import hashlib
import json
from typing import Any, Dict

from sbomnorm.utils.json_safe import to_jsonable


def stable_digest(payload: Dict[str, Any]) -> str:
    """
    Compute a deterministic sha256 hex digest of a JSON-shaped payload.

    Key order and set order do not affect the result. Values without a stable
    JSON form raise TypeError rather than hashing their repr.
    """
    safe_payload = to_jsonable(payload, strict=True)
    serialized = json.dumps(safe_payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def short_id(payload: Dict[str, Any]) -> str:
    """Return the 16 hex character prefix of stable_digest, used as an artifact id."""

    return stable_digest(payload)[:16]
