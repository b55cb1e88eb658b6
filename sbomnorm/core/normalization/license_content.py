from __future__ import annotations

from typing import Any, List, Union

from sbomnorm.core.catalog.license import License, LicenseSet
from sbomnorm.core.catalog.package import Package
from sbomnorm.core.policy_engine.config import LicenseConfig, LicenseContent, normalize_license_content


def redact_license(lic: License, policy: LicenseContent) -> License:
    """Apply the content policy to one license.

    | policy          | SPDX expression | free text |
    | INCLUDE_ALL     | kept            | kept      |
    | EXCLUDE_ALL     | cleared         | cleared   |
    | INCLUDE_UNKNOWN | cleared         | kept      |
    """

    if policy == LicenseContent.INCLUDE_ALL:
        return lic
    if policy == LicenseContent.INCLUDE_UNKNOWN:
        return lic.without_contents() if lic.is_recognized else lic
    return lic.without_contents()


def redact_license_set(licenses: LicenseSet, config: Union[LicenseConfig, Any]) -> LicenseSet:
    """Return a new LicenseSet with the content policy applied.

    The result is rebuilt from scratch: clearing contents can make two entries
    equal, and they collapse into one.
    """

    policy = _resolve_policy(config)
    redacted: List[License] = [redact_license(lic, policy) for lic in licenses]
    return LicenseSet(redacted)


def apply_license_content_rules(package: Package, config: Union[LicenseConfig, Any]) -> None:
    """Redact embedded license text of a package in place.

    Only package.licenses is replaced; the package id is untouched.
    """

    if package.licenses.is_empty():
        return
    package.licenses = redact_license_set(package.licenses, config)


def _resolve_policy(config: Union[LicenseConfig, Any]) -> LicenseContent:
    if isinstance(config, LicenseConfig):
        return config.policy
    # bare selector (str / enum / None) handed in by a caller
    return normalize_license_content(config)
