from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Tuple


@dataclass(frozen=True)
class License:
    """
    Value record for a single license declaration.

    A license is either a resolvable SPDX expression (spdx_expression set) or a
    free-text value that could not be resolved. contents optionally carries
    the embedded license text.

    Invariants
    - Frozen: equality and hashing are by value, never by reference
    - locations is stored as a frozenset so hashing stays stable
    """

    value: str = ""
    spdx_expression: str = ""
    type: str = "declared"
    contents: str = ""
    locations: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in ("value", "spdx_expression", "type", "contents"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"License.{name} must be a string")

        if not isinstance(self.locations, frozenset):
            object.__setattr__(self, "locations", frozenset(self.locations))

    @property
    def is_recognized(self) -> bool:
        return self.spdx_expression.strip() != ""

    def without_contents(self) -> "License":
        if not self.contents:
            return self
        return replace(self, contents="")

    def sort_key(self) -> Tuple[str, ...]:
        return (
            self.spdx_expression,
            self.value,
            self.type,
            self.contents,
            *sorted(self.locations),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "spdx_expression": self.spdx_expression,
            "type": self.type,
            "contents": self.contents,
            "locations": sorted(self.locations),
        }


class LicenseSet:
    """
    Deduplicating collection of License values.

    Iteration order is lexical (by sort_key), never insertion order, so two
    sets built from the same licenses in a different order serialize alike.
    """

    def __init__(self, licenses: Iterable[License] = ()) -> None:
        self._items: Dict[License, None] = {}
        self.add(*licenses)

    def add(self, *licenses: License) -> None:
        for lic in licenses:
            if not isinstance(lic, License):
                raise TypeError("LicenseSet accepts only License instances")
            self._items[lic] = None

    def to_list(self) -> List[License]:
        return sorted(self._items, key=License.sort_key)

    def is_empty(self) -> bool:
        return not self._items

    def __iter__(self) -> Iterator[License]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LicenseSet):
            return NotImplemented
        return self._items.keys() == other._items.keys()

    def __repr__(self) -> str:
        return f"LicenseSet({self.to_list()!r})"
