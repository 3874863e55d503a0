import pytest

from monotone.cloud_config import MonotoneError
from monotone.fill import fill_gaps
from monotone.ids import Id


def _covered(ranges):
    points = set()
    for low, high in ranges:
        points.update(range(low, high + 1))
    return points


def test_empty_mapping_gives_whole_range():
    assert fill_gaps([], 3, 7) == [Id(3, 7)]


def test_invalid_interval_raises():
    with pytest.raises(MonotoneError, match="invalid partition interval"):
        fill_gaps([], 7, 3)


def test_fully_covered_range_has_no_gaps():
    assert fill_gaps([(0, 9)], 2, 5) == []


def test_gaps_around_a_slice():
    assert fill_gaps([(10, 19)], 0, 29) == [Id(0, 9), Id(20, 29)]


def test_accepts_id_objects():
    assert fill_gaps([Id(10, 19)], 10, 19) == []


@pytest.mark.parametrize(
    "slices, low, high",
    [
        ([(10, 19)], 0, 29),
        ([(0, 4), (10, 14), (20, 24)], 0, 30),
        ([(5, 9)], 7, 40),
        ([(30, 39), (0, 9)], 5, 35),
        ([(100, 199)], 0, 50),
        ([(0, 9), (10, 19)], 0, 19),
    ],
)
def test_gaps_and_slices_cover_the_range(slices, low, high):
    gaps = fill_gaps(slices, low, high)
    gap_points = _covered((g.min, g.max) for g in gaps)
    slice_points = _covered(slices)
    wanted = set(range(low, high + 1))
    assert wanted <= gap_points | slice_points
    assert not gap_points & slice_points
    assert gap_points <= wanted
    assert [g.min for g in gaps] == sorted(g.min for g in gaps)
    assert all(g.min <= g.max for g in gaps)