import pytest

from visgram.reactive import Broker, is_reactive, isolate, reactive, read, source


def test_read_recomputes_after_source_change() -> None:
    n = source(2, label="n")
    doubled = reactive(lambda: read(n) * 2)
    assert read(doubled) == 4
    n.set(5)
    assert read(doubled) == 10


def test_invalidation_is_transitive() -> None:
    a = source(1, label="a")
    b = reactive(lambda: read(a) + 1)
    c = reactive(lambda: read(b) * 10)
    assert read(c) == 20
    a.set(2)
    assert c.cell.dirty
    assert read(c) == 30


def test_cells_cache_until_invalidated() -> None:
    a = source(1, label="cache_src")
    calls: list[int] = []

    def compute() -> int:
        calls.append(1)
        return read(a)

    r = reactive(compute)
    read(r)
    read(r)
    assert len(calls) == 1
    a.set(3)
    assert read(r) == 3
    assert len(calls) == 2


def test_isolate_records_no_dependency() -> None:
    a = source(1, label="iso_src")
    r = reactive(lambda: isolate(lambda: read(a)))
    assert read(r) == 1
    a.set(5)
    assert read(r) == 1


def test_identical_definitions_share_identity() -> None:
    n = source(1, label="shared")

    def make():
        return reactive(lambda: read(n) * 2)

    assert make().id == make().id
    assert make().id.startswith("reactive_")
    assert reactive(lambda: read(n) * 3).id != make().id
    assert reactive(lambda: read(n) * 2, label="other").id != make().id


def test_sources_by_label() -> None:
    assert source(1, label="same").id == source(2, label="same").id
    assert source(1).id != source(1).id


def test_read_and_is_reactive_on_plain_values() -> None:
    assert read(3) == 3
    assert not is_reactive(3)
    assert is_reactive(source(3))


def test_derived_reactive_cannot_be_set() -> None:
    r = reactive(lambda: 1)
    with pytest.raises(TypeError):
        r.set(2)


def test_reactive_carries_broker() -> None:
    b = Broker(controls=({"type": "slider"},))
    r = reactive(lambda: 1, broker=b)
    assert r.broker is b
    assert r() == 1


def _countdown_reactive(start: int):
    def count(n: int) -> int:
        return 0 if n == 0 else 1 + count(n - 1)

    return reactive(lambda: count(start))


def test_recursive_closures_can_be_fingerprinted() -> None:
    r = _countdown_reactive(3)
    assert read(r) == 3
    assert _countdown_reactive(3).id == r.id
    assert _countdown_reactive(4).id != r.id


def test_opaque_closure_values_use_object_identity() -> None:
    class Box:
        pass

    def make(box: Box):
        return reactive(lambda: box)

    box = Box()
    assert make(box).id == make(box).id
    assert make(Box()).id != make(box).id
