from __future__ import annotations

import logging
from typing import List, Optional

from sbomnorm.core.catalog.package import STUBBABLE_FIELDS, Package
from sbomnorm.core.policy_engine.config import UNKNOWN_STUB_VALUE
from sbomnorm.core.runtime.pipeline import FinalizeResult
from sbomnorm.utils.json_safe import to_jsonable

from .models import ComplianceReport, DroppedPackageOut, PackageRefOut, StubbedPackageOut

log = logging.getLogger("sbomnorm.report")


def _ref(package: Package) -> PackageRefOut:
    return PackageRefOut(
        id=package.id,
        name=package.name,
        version=package.version,
        type=package.type,
        found_by=package.found_by,
        location=package.first_location_path(),
    )


def _missing_fields(package: Package) -> List[str]:
    return sorted(f for f in STUBBABLE_FIELDS if not str(getattr(package, f) or "").strip())


def build_compliance_report(result: FinalizeResult, *, extractor: str = "") -> ComplianceReport:
    """Summarize a FinalizeResult for user-facing diagnostics.

    Package metadata is passed through to_jsonable so arbitrary extractor
    values never break serialization.
    """

    dropped = [
        DroppedPackageOut(
            package=_ref(p),
            missing_fields=_missing_fields(p),
            metadata=to_jsonable(p.metadata),
        )
        for p in result.dropped
    ]
    stubbed = [
        StubbedPackageOut(
            package=_ref(m.package),
            stubbed_fields=sorted(m.stubbed_fields),
            stub_value=UNKNOWN_STUB_VALUE,
        )
        for m in result.mutations
    ]

    return ComplianceReport(
        extractor=extractor,
        package_count=len(result.packages),
        relationship_count=len(result.relationships),
        dropped=dropped,
        stubbed=stubbed,
    )


def log_compliance_warnings(report: ComplianceReport, logger: Optional[logging.Logger] = None) -> int:
    """Emit one warning per dropped package. Returns the number of warnings."""

    out = logger or log
    for item in report.dropped:
        out.warning(
            "dropping non-compliant package",
            extra={
                "extractor": report.extractor,
                "package_id": item.package.id,
                "package_name": item.package.name,
                "location": item.package.location,
                "missing_fields": item.missing_fields,
            },
        )
    for item in report.stubbed:
        out.debug(
            "stubbed package fields",
            extra={
                "extractor": report.extractor,
                "package_id": item.package.id,
                "stubbed_fields": item.stubbed_fields,
            },
        )
    return len(report.dropped)
