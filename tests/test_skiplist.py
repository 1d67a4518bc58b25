"""Unit tests for the SkipList container."""
import random

import pytest

from pyskip import SkipList


@pytest.fixture
def sl():
    """Empty list with a fixed seed and post-mutation checks enabled."""
    return SkipList(seed=1234, check_invariants=True)


@pytest.fixture
def evens():
    """0, 2, 4, ..., 98."""
    return SkipList(range(0, 100, 2), seed=7)


def test_initialization(sl):
    """A new list is empty and valid."""
    assert sl.empty()
    assert sl.size() == 0
    assert len(sl) == 0
    assert not sl
    assert 42 not in sl
    assert sl.level == 1
    assert sl.begin() == sl.end()
    assert sl.validate()


def test_single_insert(sl):
    cur, inserted = sl.insert(42)
    assert inserted
    assert cur.value == 42
    assert sl.size() == 1
    assert sl.contains(42)
    assert sl.validate()


def test_duplicate_insert_is_noop(sl):
    """Re-inserting an equal value changes nothing and returns its cursor."""
    first, _ = sl.insert(42)
    sl.insert(7)
    before = sl.format_levels()
    cur, inserted = sl.insert(42)
    assert not inserted
    assert cur == first
    assert cur.value == 42
    assert sl.size() == 2
    assert sl.format_levels() == before


def test_scenario_insert_order(sl):
    """Insert 10, 20, 30, 15 and iterate in ascending order."""
    for v in (10, 20, 30, 15):
        sl.insert(v)
    assert list(sl) == [10, 15, 20, 30]


def test_scenario_erase_middle(sl):
    for v in (10, 20, 30, 15):
        sl.insert(v)
    assert sl.erase(20)
    assert list(sl) == [10, 15, 30]
    assert not sl.contains(20)
    assert sl.contains(15)


def test_bounds(evens):
    """lower_bound / upper_bound on even integers."""
    assert evens.lower_bound(35).value == 36
    assert evens.upper_bound(35).value == 36
    assert evens.lower_bound(36).value == 36
    assert evens.upper_bound(36).value == 38
    assert evens.lower_bound(-5).value == 0
    assert evens.upper_bound(98) == evens.end()
    assert evens.lower_bound(100) == evens.end()


def test_bounds_on_empty(sl):
    assert sl.lower_bound(1) == sl.end()
    assert sl.upper_bound(1) == sl.end()


def test_large_dataset():
    """Insert 0..9999, then erase every even value."""
    sl = SkipList(range(10000), seed=99)
    assert sl.size() == 10000
    assert all(sl.contains(i) for i in range(10000))
    assert sl.validate()

    for i in range(0, 10000, 2):
        assert sl.erase(i)
    assert sl.size() == 5000
    assert sl.validate()
    assert all(sl.contains(i) for i in range(1, 10000, 2))
    assert not any(sl.contains(i) for i in range(0, 10000, 2))


def test_random_operations_match_set():
    """Random inserts and erases agree with a plain set."""
    rng = random.Random(5)
    sl = SkipList(seed=5, check_invariants=True)
    model = set()
    for _ in range(2000):
        v = rng.randrange(200)
        if rng.random() < 0.6:
            _, inserted = sl.insert(v)
            assert inserted == (v not in model)
            model.add(v)
        else:
            assert sl.erase(v) == (v in model)
            model.discard(v)
        assert sl.size() == len(model)
    assert list(sl) == sorted(model)


def test_erase_nonexistent(sl):
    sl.insert(42)
    assert not sl.erase(24)
    assert sl.size() == 1


def test_erase_trims_empty_levels(scripted):
    """Removing the only tall tower drops the levels it created."""
    sl = SkipList(level_generator=scripted(1, 4, 1))
    sl.extend([1, 2, 3])
    assert sl.level == 4
    sl.erase(2)
    assert sl.level == 1
    assert sl.validate()


def test_remove_and_discard(sl):
    sl.extend([1, 2])
    sl.discard(5)
    sl.discard(1)
    assert list(sl) == [2]
    sl.remove(2)
    with pytest.raises(KeyError):
        sl.remove(2)
    assert sl.empty()


def test_extend_counts_new_elements(sl):
    assert sl.extend([3, 1, 3, 2, 1]) == 3
    assert sl.update([4, 1]) == 1
    assert list(sl) == [1, 2, 3, 4]


def test_find(sl):
    sl.extend(["apple", "banana", "cherry"])
    assert sl.size() == 3
    assert sl.find("banana").value == "banana"
    assert sl.find("date") == sl.end()
    assert sl.validate()


def test_custom_comparator():
    """Ordering and equality follow the supplied comparator."""
    desc = SkipList([3, 1, 2], less=lambda a, b: a > b)
    assert list(desc) == [3, 2, 1]
    assert desc.lower_bound(2).value == 2
    assert desc.upper_bound(2).value == 1

    folded = SkipList(less=lambda a, b: a.lower() < b.lower())
    folded.insert("Apple")
    cur, inserted = folded.insert("apple")
    assert not inserted
    assert cur.value == "Apple"
    assert "APPLE" in folded


def test_tuple_elements_with_key_comparator():
    """Elements ordered by their first field only."""
    sl = SkipList(less=lambda a, b: a[0] < b[0])
    sl.insert((2, "b"))
    sl.insert((1, "a"))
    assert not sl.insert((2, "other"))[1]
    assert sl.find((2, None)).value == (2, "b")
    assert list(sl) == [(1, "a"), (2, "b")]


def test_reversed(evens):
    assert list(reversed(evens)) == list(range(98, -1, -2))
    assert list(reversed(SkipList())) == []


def test_max_size_and_level_ceiling():
    sl = SkipList(range(500), max_level=3, seed=2)
    assert sl.max_size() == 3
    assert sl.level <= 3
    assert sl.validate()


def test_single_level_list():
    sl = SkipList(range(50), max_level=1)
    assert sl.level == 1
    assert list(sl) == list(range(50))


def test_same_seed_same_structure():
    a = SkipList(range(200), seed=3)
    b = SkipList(range(200), seed=3)
    assert a.format_levels() == b.format_levels()


def test_instances_do_not_share_randomness():
    """Drawing levels in one list never shifts another list's sequence."""
    a = SkipList(seed=11)
    b = SkipList(seed=11)
    SkipList(range(100), seed=11)
    random.random()
    a.extend(range(100))
    b.extend(range(100))
    assert a.format_levels() == b.format_levels()


def test_invalid_constructor_arguments(scripted):
    with pytest.raises(ValueError):
        SkipList(max_level=0)
    with pytest.raises(ValueError):
        SkipList(seed=1, level_generator=scripted(1))


def test_bad_level_generator_leaves_list_untouched(scripted):
    sl = SkipList(level_generator=scripted(1, 17, 0, repeat=False))
    sl.insert(1)
    with pytest.raises(ValueError):
        sl.insert(2)
    with pytest.raises(ValueError):
        sl.insert(3)
    assert list(sl) == [1]
    assert sl.validate()


def test_equality():
    assert SkipList([1, 2, 3]) == SkipList([3, 2, 1])
    assert SkipList([1, 2]) != SkipList([1, 2, 3])
    assert SkipList([1, 2]) != SkipList([1, 3])
    assert SkipList() == SkipList()
    assert SkipList([1]) != [1]


def test_ordering():
    """Lexicographic over iteration order, ties broken by size."""
    assert SkipList([1, 2]) < SkipList([1, 3])
    assert SkipList([1, 2]) < SkipList([1, 2, 3])
    assert SkipList([2]) > SkipList([1, 5, 9])
    assert SkipList([1, 2]) <= SkipList([1, 2])
    assert SkipList([1, 2]) >= SkipList([1, 2])
    assert not SkipList([1, 2]) < SkipList([1, 2])
    with pytest.raises(TypeError):
        SkipList([1]) < [1]


def test_ordering_with_custom_comparator():
    """Equivalent but unequal elements order consistently."""
    def fold(a, b):
        return a.lower() < b.lower()

    a = SkipList(["a"], less=fold)
    b = SkipList(["A"], less=fold)
    assert a != b
    assert not a < b and not b < a
    assert not a > b and not b > a
    assert a <= b and b <= a
    assert a >= b and b >= a

    shorter = SkipList(["apple"], less=fold)
    longer = SkipList(["APPLE", "pear"], less=fold)
    assert shorter < longer
    assert longer > shorter
    assert shorter <= longer
    assert not shorter >= longer
    assert SkipList(["Zebra"], less=fold) > SkipList(["apple", "pear"], less=fold)


def test_unhashable():
    with pytest.raises(TypeError):
        hash(SkipList())


def test_repr():
    assert repr(SkipList([2, 1])) == "SkipList([1, 2])"
