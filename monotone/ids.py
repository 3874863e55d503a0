"""Partition identifiers, file states and partition file names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

from monotone.source import Source

_U64_MASK = (1 << 64) - 1


class IdState(IntFlag):
    """Which files of a partition exist."""

    NONE = 0
    ID = 1 << 0
    INCOMPLETE = 1 << 1
    COMPLETE = 1 << 2
    CLOUD = 1 << 3
    CLOUD_INCOMPLETE = 1 << 4


_SUFFIXES = {
    IdState.ID: "",
    IdState.INCOMPLETE: ".incomplete",
    IdState.COMPLETE: ".complete",
    IdState.CLOUD: ".cloud",
    IdState.CLOUD_INCOMPLETE: ".cloud.incomplete",
}

_STATES = {suffix: state for state, suffix in _SUFFIXES.items()}


@dataclass(frozen=True)
class Id:
    """Inclusive range of event ids covered by a partition."""

    min: int
    max: int = 0

    def path(self, source: Source, state: IdState, base: str) -> str:
        """Path of the partition file in the given single ``state``."""
        try:
            suffix = _SUFFIXES[IdState(state)]
        except (KeyError, ValueError):
            raise ValueError(f"invalid partition file state: {int(state)}") from None
        return source.path(base, f"{self.min:020d}{suffix}")


def parse_file_name(name: str) -> tuple[int, IdState]:
    """Split a partition file name into its minimum id and file state.

    Raises ValueError for names that are not partition files.
    """
    digits, dot, rest = name.partition(".")
    if any(ch not in "0123456789" for ch in digits):
        raise ValueError(f"not a partition file name: '{name}'")
    value = 0
    for ch in digits:
        value = (value * 10 + ord(ch) - ord("0")) & _U64_MASK
    state = _STATES.get(dot + rest)
    if state is None:
        raise ValueError(f"not a partition file name: '{name}'")
    return value, state