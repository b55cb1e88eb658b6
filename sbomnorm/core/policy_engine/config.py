from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .policy_exceptions import PolicyConfigurationError

UNKNOWN_STUB_VALUE: str = "UNKNOWN"


class ComplianceAction(str, Enum):
    """Response to a missing mandatory package field."""

    KEEP = "keep"
    DROP = "drop"
    STUB = "stub"


class LicenseContent(str, Enum):
    """Which embedded license texts survive into the output."""

    INCLUDE_ALL = "all"
    EXCLUDE_ALL = "none"
    INCLUDE_UNKNOWN = "unknown"


ActionLike = Union[ComplianceAction, str, None]
ContentLike = Union[LicenseContent, str, None]


def _normalize_token(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    return value.strip().lower()


def normalize_compliance_action(value: Any) -> ComplianceAction:
    """Resolve an open policy selector to a ComplianceAction.

    Unset, unknown or non-string values resolve to KEEP (no effect).
    """

    token = _normalize_token(value)
    if token == ComplianceAction.DROP.value:
        return ComplianceAction.DROP
    if token == ComplianceAction.STUB.value:
        return ComplianceAction.STUB
    if token == ComplianceAction.KEEP.value:
        return ComplianceAction.KEEP
    return ComplianceAction.KEEP


def normalize_license_content(value: Any) -> LicenseContent:
    """Resolve an open policy selector to a LicenseContent policy.

    Unset, unknown or non-string values resolve to EXCLUDE_ALL: leaking license
    text is the worse failure compared to over-redacting it.
    """

    token = _normalize_token(value)
    if token == LicenseContent.INCLUDE_ALL.value:
        return LicenseContent.INCLUDE_ALL
    if token == LicenseContent.INCLUDE_UNKNOWN.value:
        return LicenseContent.INCLUDE_UNKNOWN
    if token == LicenseContent.EXCLUDE_ALL.value:
        return LicenseContent.EXCLUDE_ALL
    return LicenseContent.EXCLUDE_ALL


@dataclass(frozen=True)
class ComplianceConfig:
    """
    One policy per mandatory field.

    Values are stored as given; the compliance engine normalizes them at
    evaluation time and never assumes upstream validation.
    """

    missing_name: ActionLike = None
    missing_version: ActionLike = None

    def policies(self) -> Dict[str, ComplianceAction]:
        """Field name -> normalized action, in evaluation order."""

        return {
            "name": normalize_compliance_action(self.missing_name),
            "version": normalize_compliance_action(self.missing_version),
        }


@dataclass(frozen=True)
class LicenseConfig:
    include_content: ContentLike = LicenseContent.EXCLUDE_ALL

    @property
    def policy(self) -> LicenseContent:
        return normalize_license_content(self.include_content)


def default_compliance_config() -> ComplianceConfig:
    """Defaults applied by the surrounding tool (the engine enforces none)."""

    return ComplianceConfig(
        missing_name=ComplianceAction.DROP,
        missing_version=ComplianceAction.STUB,
    )


def default_license_config() -> LicenseConfig:
    return LicenseConfig(include_content=LicenseContent.EXCLUDE_ALL)


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    # accept both snake_case and kebab-case keys
    if key in data:
        return data[key]
    return data.get(key.replace("_", "-"))


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise PolicyConfigurationError(f"{what} must be a mapping")
    for k in data.keys():
        if not isinstance(k, str):
            raise PolicyConfigurationError(f"{what} keys must be strings")
    return data


def compliance_config_from_mapping(data: Optional[Mapping[str, Any]]) -> ComplianceConfig:
    """Build a ComplianceConfig from an already-loaded mapping.

    Values are normalized; unrecognized values become KEEP.
    """

    m = _require_mapping(data, "compliance config")
    return ComplianceConfig(
        missing_name=normalize_compliance_action(_lookup(m, "missing_name")),
        missing_version=normalize_compliance_action(_lookup(m, "missing_version")),
    )


def license_config_from_mapping(data: Optional[Mapping[str, Any]]) -> LicenseConfig:
    """Build a LicenseConfig from an already-loaded mapping.

    Missing or unrecognized include_content becomes EXCLUDE_ALL.
    """

    m = _require_mapping(data, "license config")
    return LicenseConfig(include_content=normalize_license_content(_lookup(m, "include_content")))
