from __future__ import annotations

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Set

from sbomnorm.core.catalog.package import Package
from sbomnorm.core.policy_engine.policy_models import MutationRecord


class PackageIndex:
    """
    Content-keyed side index over a package batch.

    Keeps two views:
    - id -> package
    - content digest -> ids sharing that content

    Package ids are stable across approved mutations, so refresh only has to
    move the digest entry of each mutated package instead of rebuilding.
    """

    def __init__(self, packages: Iterable[Package] = ()) -> None:
        self._by_id: Dict[str, Package] = {}
        self._digest_of: Dict[str, str] = {}
        self._by_digest: Dict[str, Set[str]] = {}
        for p in packages:
            self.add(p)

    def add(self, package: Package) -> "PackageIndex":
        """
        Register a package.

        Raises
        - TypeError: if package is not a Package.
        - RuntimeError: if package.id is already indexed.
        """

        if not isinstance(package, Package):
            raise TypeError("Only Package instances may be indexed")
        if package.id in self._by_id:
            raise RuntimeError(f"Duplicate package id detected: {package.id}")

        self._by_id[package.id] = package
        self._link(package.id, package.content_digest())
        return self

    def refresh(self, mutations: Iterable[MutationRecord]) -> int:
        """
        Re-key mutated packages by their current content.

        Returns the number of entries whose digest changed.

        Raises
        - RuntimeError: if a record refers to a package that was never indexed.
        """

        changed = 0
        for record in mutations:
            if record.original_id not in self._by_id:
                raise RuntimeError(f"Cannot refresh missing package id: {record.original_id}")

            self._by_id[record.original_id] = record.package
            digest = record.package.content_digest()
            if self._digest_of.get(record.original_id) == digest:
                continue

            self._unlink(record.original_id)
            self._link(record.original_id, digest)
            changed += 1

        return changed

    def get(self, package_id: str) -> Package:
        return self._by_id[package_id]

    def ids_for_digest(self, digest: str) -> FrozenSet[str]:
        return frozenset(self._by_digest.get(digest, ()))

    def digest_of(self, package_id: str) -> str:
        return self._digest_of[package_id]

    def packages(self) -> Mapping[str, Package]:
        return MappingProxyType(dict(self._by_id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._by_id

    def _link(self, package_id: str, digest: str) -> None:
        self._digest_of[package_id] = digest
        self._by_digest.setdefault(digest, set()).add(package_id)

    def _unlink(self, package_id: str) -> None:
        digest = self._digest_of.pop(package_id, None)
        if digest is None:
            return
        ids = self._by_digest.get(digest)
        if ids is not None:
            ids.discard(package_id)
            if not ids:
                del self._by_digest[digest]
