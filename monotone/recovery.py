"""Crash recovery of partition files found in a storage directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from monotone.cloud_config import MonotoneError
from monotone.ids import IdState, parse_file_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecoveryAction:
    """What recovery does with one partition.

    ``delete`` is the single file state to remove (or NONE), ``rename`` a
    pair of file states to move from and to, ``remove`` whether the
    partition is dropped altogether, and ``state`` the state it ends in.
    """

    state: IdState
    delete: IdState = IdState.NONE
    rename: tuple[IdState, IdState] | None = None
    remove: bool = False


_ID = IdState.ID
_CLOUD = IdState.CLOUD
_INCOMPLETE = IdState.INCOMPLETE
_COMPLETE = IdState.COMPLETE
_CLOUD_INCOMPLETE = IdState.CLOUD_INCOMPLETE


def scan_directory(path: str) -> dict[int, IdState]:
    """Collect partition file states of a storage directory, keyed by min id.

    Hidden files are ignored and unknown files are logged and skipped.
    """
    try:
        names = os.listdir(path)
    except OSError as exc:
        raise MonotoneError(f"storage: directory '{path}' open error") from exc
    states: dict[int, IdState] = {}
    for name in names:
        if name.startswith("."):
            continue
        try:
            min_id, state = parse_file_name(name)
        except ValueError:
            logger.info("storage: skipping unknown file: '%s/%s'", path, name)
            continue
        states[min_id] = states.get(min_id, IdState.NONE) | state
    return dict(sorted(states.items()))


def _unexpected(min_id: int, state: IdState) -> MonotoneError:
    return MonotoneError(f"partition '{min_id}' has unexpected state: {int(state)}")


def recover_action(
    min: int, state: IdState, other_state: IdState | None = None
) -> RecoveryAction:
    """Decide how to bring a partition back to a consistent state.

    ``other_state`` is the state of the partition with the same min id on
    another storage, or None if there is none.
    """
    state = IdState(state)
    if state in (_ID, _ID | _CLOUD, _CLOUD):
        return RecoveryAction(state=state)

    # crash during refresh, before the new file was complete
    if state == _INCOMPLETE:
        return RecoveryAction(state=IdState.NONE, delete=_INCOMPLETE, remove=True)
    if state == _ID | _INCOMPLETE:
        return RecoveryAction(state=_ID, delete=_INCOMPLETE)

    # crash after the new file was complete, old file still present
    if state == _ID | _COMPLETE:
        return RecoveryAction(state=_ID, delete=_COMPLETE)

    # crash after the old file was removed, or during a move
    if state == _COMPLETE:
        if other_state is not None:
            if not other_state & _ID:
                raise _unexpected(min, IdState(other_state))
            return RecoveryAction(state=IdState.NONE, delete=_COMPLETE, remove=True)
        return RecoveryAction(state=_ID, rename=(_COMPLETE, _ID))

    # crash during download
    if state == _CLOUD | _INCOMPLETE:
        return RecoveryAction(state=_CLOUD, delete=_INCOMPLETE)

    # crash during upload
    if state == _ID | _CLOUD_INCOMPLETE:
        return RecoveryAction(state=_ID, delete=_CLOUD_INCOMPLETE)

    raise _unexpected(min, state)