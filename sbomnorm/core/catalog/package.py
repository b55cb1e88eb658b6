from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sbomnorm.core.runtime.hashing import short_id, stable_digest

from .identifiers import PlatformIdentifier
from .license import LicenseSet
from .relationship import Location

STUBBABLE_FIELDS = frozenset({"name", "version"})


@dataclass
class Package:
    """
    Identity-bearing package record produced by an extractor.

    Identity invariants
    - id is a content hash of the defining fields, computed exactly once in
      __post_init__ and never recomputed afterwards
    - the only sanctioned mutation of defining fields is stub_field, which is
      documented to leave id untouched so relationships stay valid
    - content_digest reflects the *current* content and is what content-keyed
      indices should use to notice approved mutations

    Complexity
    - construction / content_digest: O(n) in the size of the serialized record
    """

    name: Optional[str] = ""
    version: Optional[str] = ""
    type: str = ""
    purl: str = ""
    found_by: str = ""
    locations: List[Location] = field(default_factory=list)
    licenses: LicenseSet = field(default_factory=LicenseSet)
    identifiers: List[PlatformIdentifier] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    _id: str = field(default="", init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.licenses, LicenseSet):
            self.licenses = LicenseSet(self.licenses)
        self.locations = list(self.locations)
        self.identifiers = list(self.identifiers)
        self._id = short_id(self._content_payload())

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_id" and self.__dict__.get("_id"):
            raise RuntimeError("Package id is immutable once assigned")
        super().__setattr__(name, value)

    @property
    def id(self) -> str:
        return self._id

    def _content_payload(self) -> Dict[str, Any]:
        # found_by is provenance, not content; stamping it must not move the hash
        return {
            "name": self.name,
            "version": self.version,
            "type": self.type,
            "purl": self.purl,
            "locations": [loc.to_dict() for loc in self.locations],
            "licenses": [lic.to_dict() for lic in self.licenses],
            "identifiers": [ident.to_dict() for ident in self.identifiers],
            "metadata": self.metadata,
        }

    def content_digest(self) -> str:
        return stable_digest(self._content_payload())

    def stub_field(self, field_name: str, value: str) -> str:
        """Overwrite a mandatory field in place with a stub value.

        The package id is NOT recomputed: every relationship referencing the
        package stays valid. Callers are expected to publish a change record
        pairing the returned id with the mutated package.

        Returns the (unchanged) package id.
        """

        if field_name not in STUBBABLE_FIELDS:
            raise ValueError(f"field cannot be stubbed: {field_name}")
        if not isinstance(value, str) or not value:
            raise ValueError("stub value must be a non-empty string")

        original_id = self._id
        setattr(self, field_name, value)
        return original_id

    def copy(self) -> "Package":
        """Return an independent copy that keeps the same id."""

        return deepcopy(self)

    def first_location_path(self) -> str:
        if not self.locations:
            return "unknown"
        return sorted(loc.path for loc in self.locations)[0]

    def __str__(self) -> str:
        return f"Pkg(name={self.name!r} version={self.version!r} type={self.type!r} id={self._id})"
