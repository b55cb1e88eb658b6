from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class PackageRefOut(BaseModel):
    """A safe summary of a package, enough to locate it in the scanned source."""

    id: str
    name: Optional[str] = None
    version: Optional[str] = None
    type: str = ""
    found_by: str = ""
    location: str = "unknown"


class DroppedPackageOut(BaseModel):
    """A package excluded by compliance policy, as it was before evaluation."""

    package: PackageRefOut
    missing_fields: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class StubbedPackageOut(BaseModel):
    """A surviving package whose mandatory fields were filled with the stub value."""

    package: PackageRefOut
    stubbed_fields: List[str] = Field(default_factory=list)
    stub_value: str


class ComplianceReport(BaseModel):
    """Diagnostics for one finalized batch."""

    extractor: str = ""
    package_count: int
    relationship_count: int
    dropped: List[DroppedPackageOut] = Field(default_factory=list)
    stubbed: List[StubbedPackageOut] = Field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.dropped or self.stubbed)
