"""Compliance diagnostics.

Turns the dropped/stubbed side outputs of a finalized batch into serializable
report models and log warnings for the surrounding tool.
"""

from .builder import build_compliance_report, log_compliance_warnings  # noqa: F401
from .models import (  # noqa: F401
    ComplianceReport,
    DroppedPackageOut,
    PackageRefOut,
    StubbedPackageOut,
)
