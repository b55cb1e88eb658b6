import pytest

from sbomnorm.core.catalog.identifiers import IdentifierSource, PlatformIdentifier
from sbomnorm.core.catalog.license import License
from sbomnorm.core.catalog.package import Package
from sbomnorm.core.catalog.relationship import Coordinates, Location, Relationship
from sbomnorm.core.policy_engine.config import (
    UNKNOWN_STUB_VALUE,
    LicenseConfig,
    LicenseContent,
    default_compliance_config,
)
from sbomnorm.core.policy_engine.policy_exceptions import PolicyViolation
from sbomnorm.core.runtime.index import PackageIndex
from sbomnorm.core.runtime.pipeline import FinalizeResult, PackageFinalizer


def _make_batch():
    kernel = Package(
        name="linux-kernel",
        version="5.15.0-1031-aws",
        type="linux-kernel",
        identifiers=[
            PlatformIdentifier(
                "cpe:2.3:o:linux:linux_kernel:5.15.0-1031-aws:*:*:*:*:*:*:*",
                IdentifierSource.NVD_DICTIONARY_LOOKUP,
            )
        ],
    )
    module = Package(
        name="8821cu",
        version="",
        type="linux-kernel-module",
        locations=[Location.from_path("/lib/modules/5.10.121-linuxkit/kernel/drivers/net/8821cu.ko")],
        licenses=[License(spdx_expression="GPL-2.0-only", contents="GNU GENERAL PUBLIC LICENSE ...")],
    )
    nameless = Package(name="", version="0.1", type="linux-kernel-module")
    ko = Coordinates(real_path="/lib/modules/5.10.121-linuxkit/kernel/drivers/net/8821cu.ko")
    rels = [
        Relationship(from_=kernel, to=module),
        Relationship(from_=module, to=ko),
        Relationship(from_=kernel, to=nameless),
    ]
    return kernel, module, nameless, rels


def _generator(calls):
    def gen(p: Package):
        calls.append(p.name)
        return [PlatformIdentifier(f"cpe:2.3:a:*:{p.name or 'x'}:*:*:*:*:*:*:*:*", IdentifierSource.GENERATED)]

    return gen


def test_finalize_runs_every_stage():
    kernel, module, nameless, rels = _make_batch()
    ids_before = [kernel.id, module.id, nameless.id]
    calls = []

    finalizer = PackageFinalizer(
        compliance=default_compliance_config(),
        licenses=LicenseConfig(include_content=LicenseContent.EXCLUDE_ALL),
        identifier_generator=_generator(calls),
    )
    result = finalizer.finalize([kernel, module, nameless], rels, extractor_name="linux-kernel-cataloger")

    assert isinstance(result, FinalizeResult)
    assert result.packages == [kernel, module]
    assert [p.id for p in result.dropped] == [nameless.id]
    assert result.relationships == rels[:2]
    assert [m.original_id for m in result.mutations] == [module.id]
    assert module.version == UNKNOWN_STUB_VALUE
    assert [kernel.id, module.id, nameless.id] == ids_before

    assert {p.found_by for p in (kernel, module, nameless)} == {"linux-kernel-cataloger"}
    # kernel already had an authoritative identifier, nameless was dropped
    assert calls == ["8821cu"]
    assert nameless.identifiers == []
    assert len(kernel.identifiers) == 1
    assert module.licenses.to_list() == [License(spdx_expression="GPL-2.0-only")]


def test_finalize_is_idempotent():
    kernel, module, nameless, rels = _make_batch()
    finalizer = PackageFinalizer(
        compliance=default_compliance_config(),
        identifier_generator=_generator([]),
    )

    first = finalizer.finalize([kernel, module, nameless], rels, extractor_name="x")
    snapshot = [(p.id, p.content_digest()) for p in first.packages]
    second = finalizer.finalize(first.packages, first.relationships, extractor_name="x")

    assert [(p.id, p.content_digest()) for p in second.packages] == snapshot
    assert second.relationships == first.relationships
    assert second.dropped == []
    assert second.mutations == []


def test_existing_found_by_is_not_overwritten():
    p = Package(name="a", version="1", found_by="dpkg-db-cataloger")
    PackageFinalizer(compliance=default_compliance_config()).finalize([p], extractor_name="other")
    assert p.found_by == "dpkg-db-cataloger"


def test_strict_mode_raises_with_dropped_ids():
    kernel, module, nameless, rels = _make_batch()
    finalizer = PackageFinalizer(compliance=default_compliance_config(), strict=True)

    with pytest.raises(PolicyViolation) as exc:
        finalizer.finalize([kernel, module, nameless], rels)

    assert exc.value.dropped_ids == (nameless.id,)


def test_constructor_type_checks():
    with pytest.raises(TypeError):
        PackageFinalizer(compliance={"missing_name": "drop"})
    with pytest.raises(TypeError):
        PackageFinalizer(compliance=default_compliance_config(), licenses="all")
    with pytest.raises(TypeError):
        PackageFinalizer(compliance=default_compliance_config(), identifier_generator="cpe")


def test_generator_must_yield_platform_identifiers():
    finalizer = PackageFinalizer(
        compliance=default_compliance_config(),
        identifier_generator=lambda p: ["cpe:2.3:a:x:y:1:*:*:*:*:*:*:*"],
    )
    with pytest.raises(TypeError):
        finalizer.finalize([Package(name="a", version="1")])


def test_generator_only_sees_surviving_packages():
    calls = []
    dropped = Package(name="", version="1.0")
    kept = Package(name="kept", version="1.0")

    result = PackageFinalizer(
        compliance=default_compliance_config(),
        identifier_generator=_generator(calls),
    ).finalize([dropped, kept])

    assert calls == ["kept"]
    assert result.dropped[0].identifiers == []


def test_index_built_from_output_stays_in_sync_across_passes():
    kernel, module, nameless, rels = _make_batch()
    finalizer = PackageFinalizer(compliance=default_compliance_config(), identifier_generator=_generator([]))

    first = finalizer.finalize([kernel, module, nameless], rels)
    index = PackageIndex(first.packages)

    second = finalizer.finalize(first.packages, first.relationships)
    index.refresh(second.mutations)

    for p in second.packages:
        assert index.digest_of(p.id) == p.content_digest()
