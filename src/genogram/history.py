"""Bounded snapshot-based undo/redo history."""

import copy
import logging
from typing import Generic, TypeVar

from genogram.config import settings

logger = logging.getLogger(__name__)

S = TypeVar("S")


class History(Generic[S]):
    """
    Linear undo/redo stack of deep-copied snapshots.

    The initial state sits at index 0. Saving after an undo drops the redo tail, and the
    oldest snapshots are evicted once `limit` is exceeded. Snapshots are copied on the
    way in and on the way out, so nothing outside the stack can alias them.
    """

    def __init__(self, initial_state: S, limit: int | None = None):
        if limit is None:
            limit = settings.history_limit
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._snapshots: list[S] = [copy.deepcopy(initial_state)]
        self._index = 0

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    @property
    def current(self) -> S:
        """A fresh copy of the snapshot at the current index."""
        return copy.deepcopy(self._snapshots[self._index])

    def save(self, state: S) -> None:
        snapshot = copy.deepcopy(state)
        discarded = len(self._snapshots) - self._index - 1
        if discarded:
            logger.debug("Discarding %d redo snapshot(s)", discarded)
        del self._snapshots[self._index + 1 :]
        self._snapshots.append(snapshot)

        overflow = len(self._snapshots) - self.limit
        if overflow > 0:
            del self._snapshots[:overflow]
        self._index = len(self._snapshots) - 1

    def undo(self) -> S:
        """Step back one snapshot (no-op at the oldest) and return the current state."""
        if self._index > 0:
            self._index -= 1
        return self.current

    def redo(self) -> S:
        """Step forward one snapshot (no-op at the newest) and return the current state."""
        if self._index < len(self._snapshots) - 1:
            self._index += 1
        return self.current

    def reset(self, initial_state: S) -> None:
        """Forget all snapshots and start again from `initial_state`."""
        self._snapshots = [copy.deepcopy(initial_state)]
        self._index = 0
