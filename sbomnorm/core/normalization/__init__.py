"""Normalization helpers for sbomnorm.

Normalization rewrites package content that extractors attached verbatim
(embedded license text) according to output policy, without touching the
identity of the package.

Notes:
- Transforms are pure per license and deterministic.
- Unknown policy values fall back to the most restrictive behaviour.
"""

from .license_content import apply_license_content_rules, redact_license, redact_license_set

__all__ = [
    "apply_license_content_rules",
    "redact_license",
    "redact_license_set",
]
