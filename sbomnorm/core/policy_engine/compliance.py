from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sbomnorm.core.catalog.package import Package
from sbomnorm.core.catalog.relationship import Relationship

from .config import UNKNOWN_STUB_VALUE, ComplianceAction, ComplianceConfig
from .consistency import remove_dangling_relationships
from .policy_models import ComplianceResult, FieldDecision, MutationRecord

log = logging.getLogger("sbomnorm.compliance")


def _is_empty(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def _field_value(package: Package, field_name: str) -> Optional[str]:
    return getattr(package, field_name)


def apply_compliance_rules(package: Package, config: ComplianceConfig) -> ComplianceResult:
    """Evaluate every configured field policy against one package.

    Each empty field is handled independently:
    - KEEP: nothing happens
    - DROP: the package becomes non-compliant
    - STUB: the field is overwritten in place with UNKNOWN_STUB_VALUE

    A STUB is applied even when another field already dropped the package, so
    a non-compliant result may still carry a mutation.

    The package id never changes.

    Time:  O(1) per field
    Space: O(1)
    """

    drop = False
    stubbed = False
    original_id = package.id
    decisions: List[FieldDecision] = []

    for field_name, action in config.policies().items():
        if not _is_empty(_field_value(package, field_name)):
            continue

        decisions.append(FieldDecision(field_name=field_name, action=action))

        if action == ComplianceAction.DROP:
            log.debug(
                "package with missing %s, dropping (pkg=%s location=%s)",
                field_name,
                package,
                package.first_location_path(),
            )
            drop = True
        elif action == ComplianceAction.STUB:
            log.debug(
                "package with missing %s, stubbing (pkg=%s location=%s value=%s)",
                field_name,
                package,
                package.first_location_path(),
                UNKNOWN_STUB_VALUE,
            )
            package.stub_field(field_name, UNKNOWN_STUB_VALUE)
            stubbed = True

    mutation = None
    if stubbed:
        mutation = MutationRecord(
            original_id=original_id,
            package=package,
            stubbed_fields=tuple(d.field_name for d in decisions if d.action == ComplianceAction.STUB),
        )
    return ComplianceResult(is_compliant=not drop, mutation=mutation, decisions=tuple(decisions))


def _will_stub(package: Package, policies: Dict[str, ComplianceAction]) -> bool:
    return any(
        action == ComplianceAction.STUB and _is_empty(_field_value(package, field_name))
        for field_name, action in policies.items()
    )


def partition(
    packages: Sequence[Package], config: ComplianceConfig
) -> Tuple[List[Package], List[Package], List[MutationRecord]]:
    """Split a batch into (surviving, dropped, mutations).

    - surviving: compliant packages, stubbed ones included (mutated in place)
    - dropped: non-compliant packages as they were before evaluation
    - mutations: one record per stubbed survivor

    Relative input order is preserved in every output list.

    Time:  O(n)
    Space: O(n)
    """

    policies = config.policies()
    surviving: List[Package] = []
    dropped: List[Package] = []
    mutations: List[MutationRecord] = []

    for package in packages:
        # keep a pristine copy only when this evaluation is going to write to the package
        original = package.copy() if _will_stub(package, policies) else package

        result = apply_compliance_rules(package, config)

        if result.is_compliant:
            surviving.append(package)
            if result.mutation is not None:
                mutations.append(result.mutation)
        else:
            dropped.append(original)

    return surviving, dropped, mutations


def apply_compliance(
    config: ComplianceConfig,
    packages: Sequence[Package],
    relationships: Sequence[Relationship],
) -> Tuple[List[Package], List[Relationship]]:
    """Drop/stub non-compliant packages and remove relationships left dangling."""

    surviving, dropped, _ = partition(packages, config)
    remaining = remove_dangling_relationships(relationships, (p.id for p in dropped))
    return surviving, remaining
