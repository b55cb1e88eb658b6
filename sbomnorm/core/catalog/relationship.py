from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from sbomnorm.core.runtime.hashing import short_id


@runtime_checkable
class Identifiable(Protocol):
    """Anything that can be the endpoint of a relationship."""

    @property
    def id(self) -> str: ...


class RelationshipKind(str, Enum):
    CONTAINS = "contains"
    OWNERSHIP_BY_FILE_OVERLAP = "ownership-by-file-overlap"
    EVIDENT_BY = "evident-by"
    DEPENDENCY_OF = "dependency-of"
    DESCRIBES = "describes"


@dataclass(frozen=True)
class Coordinates:
    """
    Non-package artifact: a file inside a scanned source.

    The identifier is derived from (real_path, file_system_id) so equal
    coordinates always share an id.
    """

    real_path: str
    file_system_id: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.real_path, str) or not self.real_path:
            raise ValueError("real_path must be a non-empty string")

    @property
    def id(self) -> str:
        return short_id({"real_path": self.real_path, "file_system_id": self.file_system_id})

    def to_dict(self) -> Dict[str, Any]:
        return {"real_path": self.real_path, "file_system_id": self.file_system_id}


@dataclass(frozen=True)
class Location:
    """Where a package was found: coordinates plus the path used to reach them."""

    coordinates: Coordinates
    access_path: Optional[str] = None

    @classmethod
    def from_path(cls, real_path: str, access_path: Optional[str] = None) -> "Location":
        return cls(coordinates=Coordinates(real_path=real_path), access_path=access_path)

    @property
    def real_path(self) -> str:
        return self.coordinates.real_path

    @property
    def path(self) -> str:
        return self.access_path or self.coordinates.real_path

    @property
    def id(self) -> str:
        return self.coordinates.id

    def to_dict(self) -> Dict[str, Any]:
        return {**self.coordinates.to_dict(), "access_path": self.access_path}


@dataclass(frozen=True, eq=False)
class Relationship:
    """
    Directed edge between two identity-bearing artifacts.

    Endpoints are compared by their id only, so a relationship keeps pointing
    at a package after an approved in-place mutation of that package.
    """

    from_: Identifiable
    to: Identifiable
    kind: RelationshipKind = RelationshipKind.CONTAINS
    data: Any = None

    def __post_init__(self) -> None:
        for name in ("from_", "to"):
            endpoint = getattr(self, name)
            if not isinstance(getattr(endpoint, "id", None), str):
                raise TypeError(f"Relationship.{name} must expose a string id")

        if not isinstance(self.kind, RelationshipKind):
            object.__setattr__(self, "kind", RelationshipKind(str(self.kind)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Relationship):
            return NotImplemented
        return (self.from_id, self.to_id, self.kind) == (other.from_id, other.to_id, other.kind)

    def __hash__(self) -> int:
        return hash((self.from_id, self.to_id, self.kind))

    @property
    def from_id(self) -> str:
        return self.from_.id

    @property
    def to_id(self) -> str:
        return self.to.id

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_id, "to": self.to_id, "kind": self.kind.value}
