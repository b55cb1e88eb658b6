import pytest

from sbomnorm.core.catalog.license import License, LicenseSet


def test_license_equality_is_by_value():
    a = License(spdx_expression="MIT", contents="text", locations={"/LICENSE"})
    b = License(spdx_expression="MIT", contents="text", locations=["/LICENSE"])

    assert a == b
    assert a is not b
    assert hash(a) == hash(b)


def test_license_set_deduplicates_by_value():
    s = LicenseSet([License(value="GPL-2.0"), License(value="GPL-2.0"), License(value="BSD")])
    assert len(s) == 2


def test_license_set_order_is_lexical_not_insertion():
    forward = LicenseSet([License(spdx_expression="MIT"), License(spdx_expression="Apache-2.0")])
    backward = LicenseSet([License(spdx_expression="Apache-2.0"), License(spdx_expression="MIT")])

    assert [l.spdx_expression for l in forward] == ["Apache-2.0", "MIT"]
    assert forward.to_list() == backward.to_list()
    assert forward == backward


def test_license_set_rejects_non_license_items():
    with pytest.raises(TypeError):
        LicenseSet(["MIT"])


def test_license_recognized_only_with_spdx_expression():
    assert License(spdx_expression="MIT").is_recognized is True
    assert License(value="Some custom terms").is_recognized is False


def test_without_contents_returns_same_value_when_already_empty():
    lic = License(spdx_expression="MIT")
    assert lic.without_contents() is lic
    assert License(spdx_expression="MIT", contents="x").without_contents() == lic
