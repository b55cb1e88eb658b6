from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class IdentifierSource(str, Enum):
    """
    Provenance of a platform identifier (CPE).

    Using str Enum keeps serialized values stable and comparisons safe.
    """

    DECLARED = "declared"
    NVD_DICTIONARY_LOOKUP = "nvd-cpe-dictionary"
    GENERATED = "syft-generator"


@dataclass(frozen=True)
class PlatformIdentifier:
    """
    Immutable platform identifier attached to a package.

    Invariants
    - value is a non-empty string (normally a CPE 2.3 formatted string)
    - source is an IdentifierSource, plain strings are coerced on construction
    """

    value: str
    source: IdentifierSource = IdentifierSource.GENERATED

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("identifier value must be a non-empty string")

        if not isinstance(self.source, IdentifierSource):
            try:
                object.__setattr__(self, "source", IdentifierSource(str(self.source)))
            except ValueError as e:
                raise ValueError(f"unknown identifier source: {self.source!r}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "source": self.source.value}
