from __future__ import annotations

from typing import FrozenSet, Iterable

from sbomnorm.core.catalog.identifiers import IdentifierSource, PlatformIdentifier
from sbomnorm.core.catalog.package import Package

AUTHORITATIVE_SOURCES: FrozenSet[IdentifierSource] = frozenset(
    {
        IdentifierSource.DECLARED,
        IdentifierSource.NVD_DICTIONARY_LOOKUP,
    }
)


def is_authoritative(identifiers: Iterable[PlatformIdentifier]) -> bool:
    """True iff at least one identifier came from a declaration or an exact
    dictionary lookup. Heuristically generated identifiers never count.

    Time:  O(n)
    Space: O(1)
    """

    return any(ident.source in AUTHORITATIVE_SOURCES for ident in identifiers)


def has_authoritative_identifiers(package: Package) -> bool:
    return is_authoritative(package.identifiers)
