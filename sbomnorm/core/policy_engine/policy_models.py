from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sbomnorm.core.catalog.package import Package

from .config import ComplianceAction


@dataclass(frozen=True)
class MutationRecord:
    """
    Change notice for an approved in-place mutation.

    original_id always equals package.id: stubbing never re-identifies a
    package. The record exists so content-keyed indices can refresh the entry
    without a full rebuild.
    """

    original_id: str
    package: Package
    stubbed_fields: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_id": self.original_id,
            "name": self.package.name,
            "version": self.package.version,
            "stubbed_fields": list(self.stubbed_fields),
        }


@dataclass(frozen=True)
class FieldDecision:
    """Outcome of one field policy applied to one empty field."""

    field_name: str
    action: ComplianceAction

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field_name, "action": self.action.value}


@dataclass(frozen=True)
class ComplianceResult:
    """
    Per-package compliance outcome.

    Invariants
    - is_compliant is False exactly when some empty field's action is DROP
    - mutation is present exactly when some field was stubbed
    """

    is_compliant: bool
    mutation: Optional[MutationRecord] = None
    decisions: Tuple[FieldDecision, ...] = field(default_factory=tuple)

    @property
    def stubbed_fields(self) -> Tuple[str, ...]:
        return tuple(d.field_name for d in self.decisions if d.action == ComplianceAction.STUB)

    @property
    def dropped_by(self) -> Tuple[str, ...]:
        return tuple(d.field_name for d in self.decisions if d.action == ComplianceAction.DROP)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_compliant": self.is_compliant,
            "mutation": self.mutation.to_dict() if self.mutation else None,
            "decisions": [d.to_dict() for d in self.decisions],
        }
