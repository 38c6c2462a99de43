"""Tests for the seeded shuffle."""

from gallery_engine.core.shuffle import new_seed, shuffle


def test_shuffle_is_deterministic_for_a_seed() -> None:
    items = list(range(100))

    assert shuffle(items, 1234) == shuffle(items, 1234)


def test_shuffle_differs_between_seeds() -> None:
    items = list(range(100))

    assert shuffle(items, 1) != shuffle(items, 2)


def test_shuffle_is_a_permutation() -> None:
    items = [f"id-{i}" for i in range(37)]

    result = shuffle(items, 99)

    assert sorted(result) == sorted(items)
    assert result != items


def test_shuffle_leaves_input_untouched() -> None:
    items = [3, 1, 2]

    shuffle(items, 7)

    assert items == [3, 1, 2]


def test_shuffle_empty_list() -> None:
    assert shuffle([], 5) == []


def test_shuffle_single_item() -> None:
    assert shuffle(["only"], 5) == ["only"]


def test_shuffle_handles_seeds_outside_int32() -> None:
    """Large or negative seeds are masked, not rejected."""
    items = list(range(10))

    assert sorted(shuffle(items, -1)) == items
    assert sorted(shuffle(items, 2**40)) == items


def test_new_seed_is_positive_int32() -> None:
    for _ in range(20):
        seed = new_seed()
        assert 0 <= seed < 2**31
