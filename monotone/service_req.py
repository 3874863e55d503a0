"""Background service requests: an id and a list of actions to run in order."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable


class ActionType(IntEnum):
    """Kinds of background work."""

    NONE = 0
    ROTATE = 1
    GC = 2
    SYNC = 3
    REBALANCE = 4
    DROP_ON_STORAGE = 5
    DROP_ON_CLOUD = 6
    REFRESH = 7
    DOWNLOAD = 8
    UPLOAD = 9


@dataclass
class ServiceReq:
    """A request for partition ``id``; ``current`` indexes the next action."""

    id: int
    actions: tuple[ActionType, ...]
    current: int = 0

    def __init__(
        self, id: int, actions: Iterable[ActionType | int], current: int = 0
    ) -> None:
        self.id = id
        self.actions = tuple(ActionType(action) for action in actions)
        self.current = current

    @property
    def action(self) -> ActionType | None:
        """The action to run next, or None when all are done."""
        if 0 <= self.current < len(self.actions):
            return self.actions[self.current]
        return None

    def is_upload(self) -> bool:
        """Whether the next action is an upload."""
        return self.action is ActionType.UPLOAD