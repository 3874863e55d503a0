"""Partition interval gap filling."""

from __future__ import annotations

from typing import Iterable, Tuple, Union

from monotone.cloud_config import MonotoneError
from monotone.ids import Id

SliceLike = Union[Id, Tuple[int, int]]


def _bounds(item: SliceLike) -> tuple[int, int]:
    if isinstance(item, Id):
        return item.min, item.max
    low, high = item
    return low, high


def fill_gaps(slices: Iterable[SliceLike], min: int, max: int) -> list[Id]:
    """Ranges inside ``[min, max]`` not covered by existing partitions.

    ``slices`` are the inclusive ranges of existing partitions. Each gap
    becomes a new partition; gaps are returned in ascending order.
    """
    if min > max:
        raise MonotoneError("fill: invalid partition interval")

    ordered = sorted(_bounds(item) for item in slices)
    if not ordered:
        return [Id(min, max)]

    gaps: list[Id] = []
    remaining = iter([s for s in ordered if s[1] >= min])
    current = next(remaining, None)
    while min <= max:
        if current is None:
            gaps.append(Id(min, max))
            break
        low, high = current
        if min < low:
            gaps.append(Id(min, max if max < low else low - 1))
            min = high + 1
        elif low <= min <= high:
            min = high + 1
        current = next(remaining, None)
    return gaps