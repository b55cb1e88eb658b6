from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from sbomnorm.core.catalog.identifiers import PlatformIdentifier
from sbomnorm.core.catalog.package import Package
from sbomnorm.core.catalog.relationship import Relationship
from sbomnorm.core.normalization.license_content import apply_license_content_rules
from sbomnorm.core.policy_engine.authority import has_authoritative_identifiers
from sbomnorm.core.policy_engine.compliance import partition
from sbomnorm.core.policy_engine.config import ComplianceConfig, LicenseConfig, default_license_config
from sbomnorm.core.policy_engine.consistency import remove_dangling_relationships
from sbomnorm.core.policy_engine.policy_exceptions import PolicyViolation
from sbomnorm.core.policy_engine.policy_models import MutationRecord

log = logging.getLogger("sbomnorm.pipeline")

IdentifierGenerator = Callable[[Package], Iterable[PlatformIdentifier]]


@dataclass(frozen=True)
class FinalizeResult:
    """Transformed batch handed to the output-encoding stage.

    - packages / relationships: what survives into the SBOM
    - dropped: non-compliant packages in their original form, for warnings
    - mutations: change notices for content-keyed indices
    """

    packages: List[Package] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    dropped: List[Package] = field(default_factory=list)
    mutations: List[MutationRecord] = field(default_factory=list)


class PackageFinalizer:
    """
    Post-extraction stage applied to one finalized batch.

    Order of operations
    1. stamp found_by with the extractor name where missing
    2. compliance partition (drop / stub)
    3. remove relationships referencing dropped packages
    4. extend identifiers via the caller's generator, only for surviving
       packages that carry no authoritative identifier
    5. license content redaction on the surviving packages

    Steps 4 and 5 change content without a MutationRecord: build any
    content-keyed index (PackageIndex) from FinalizeResult.packages, then feed
    it the mutations of later passes.

    Invariants
    - No package id changes
    - No global state: configuration is held per instance and batches are
      passed explicitly
    - Re-running on its own output yields the same output
    - Not safe for concurrent use over shared Package objects
    """

    def __init__(
        self,
        compliance: ComplianceConfig,
        licenses: Optional[LicenseConfig] = None,
        identifier_generator: Optional[IdentifierGenerator] = None,
        strict: bool = False,
    ) -> None:
        if not isinstance(compliance, ComplianceConfig):
            raise TypeError("compliance must be a ComplianceConfig instance")
        if licenses is not None and not isinstance(licenses, LicenseConfig):
            raise TypeError("licenses must be a LicenseConfig instance")
        if identifier_generator is not None and not callable(identifier_generator):
            raise TypeError("identifier_generator must be callable")

        self._compliance = compliance
        self._licenses = licenses if licenses is not None else default_license_config()
        self._identifier_generator = identifier_generator
        self._strict = bool(strict)

    def finalize(
        self,
        packages: Sequence[Package],
        relationships: Sequence[Relationship] = (),
        extractor_name: str = "",
    ) -> FinalizeResult:
        for package in packages:
            if extractor_name and not package.found_by:
                package.found_by = extractor_name

        surviving, dropped, mutations = partition(packages, self._compliance)
        remaining = remove_dangling_relationships(relationships, {p.id for p in dropped})

        for package in surviving:
            if self._identifier_generator is not None:
                self._extend_identifiers(package)
            apply_license_content_rules(package, self._licenses)

        log.debug(
            "finalized batch (extractor=%s packages=%d dropped=%d stubbed=%d relationships=%d/%d)",
            extractor_name or "-",
            len(surviving),
            len(dropped),
            len(mutations),
            len(remaining),
            len(relationships),
        )

        if self._strict and dropped:
            raise PolicyViolation(
                f"{len(dropped)} package(s) dropped by compliance policy",
                dropped_ids=[p.id for p in dropped],
            )

        return FinalizeResult(
            packages=surviving,
            relationships=remaining,
            dropped=dropped,
            mutations=mutations,
        )

    def _extend_identifiers(self, package: Package) -> None:
        if has_authoritative_identifiers(package):
            return

        generated = self._identifier_generator(package)
        for ident in generated or ():
            if not isinstance(ident, PlatformIdentifier):
                raise TypeError("identifier_generator must yield PlatformIdentifier instances")
            if ident not in package.identifiers:
                package.identifiers.append(ident)
