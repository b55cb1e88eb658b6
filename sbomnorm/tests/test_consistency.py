from sbomnorm.core.catalog.package import Package
from sbomnorm.core.catalog.relationship import Coordinates, Relationship, RelationshipKind
from sbomnorm.core.policy_engine.consistency import remove_dangling_relationships


def _graph():
    kernel = Package(name="linux-kernel", version="5.15.0")
    module = Package(name="zzstd", version="1.4.5a")
    orphan = Package(name="", version="")
    ko = Coordinates(real_path="/lib/modules/5.15.0/kernel/zfs/zzstd.ko")
    rels = [
        Relationship(from_=kernel, to=module, kind=RelationshipKind.CONTAINS),
        Relationship(from_=module, to=ko, kind=RelationshipKind.EVIDENT_BY),
        Relationship(from_=orphan, to=ko, kind=RelationshipKind.EVIDENT_BY),
        Relationship(from_=kernel, to=orphan, kind=RelationshipKind.CONTAINS),
    ]
    return kernel, module, orphan, ko, rels


def test_relationships_touching_dropped_ids_are_removed():
    kernel, module, orphan, ko, rels = _graph()

    kept = remove_dangling_relationships(rels, {orphan.id})

    assert kept == rels[:2]
    for r in kept:
        assert orphan.id not in (r.from_id, r.to_id)


def test_dropping_a_target_also_removes_the_edge():
    kernel, module, orphan, ko, rels = _graph()

    kept = remove_dangling_relationships(rels, [module.id])

    assert kept == [rels[2], rels[3]]


def test_no_dropped_ids_keeps_everything_in_order():
    *_, rels = _graph()
    kept = remove_dangling_relationships(rels, set())

    assert kept == rels
    assert kept is not rels


def test_stubbed_package_keeps_its_relationships():
    kernel, module, orphan, ko, rels = _graph()
    module.version = ""
    module.stub_field("version", "UNKNOWN")

    kept = remove_dangling_relationships(rels, frozenset({orphan.id}))

    assert rels[0] in kept
    assert rels[1] in kept


def test_relationship_equality_is_by_endpoint_ids():
    a = Package(name="a", version="1")
    ko = Coordinates(real_path="/a")
    r1 = Relationship(from_=a, to=ko)
    r2 = Relationship(from_=a.copy(), to=Coordinates(real_path="/a"), kind="contains")

    assert r1 == r2
    assert len({r1, r2}) == 1
