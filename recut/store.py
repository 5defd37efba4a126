"""Edit decision store with full-snapshot undo/redo.

Every mutation swaps in a new tuple, so callers holding a previous
``decisions`` snapshot never observe a partial change.
"""

import logging
from typing import Iterable

from recut.models import EditDecision

logger = logging.getLogger(__name__)

Snapshot = tuple[EditDecision, ...]


class EditDecisionStore:
    """Ordered, id-keyed list of edit decisions.

    Usage:
        store = EditDecisionStore()
        store.add([cut])
        store.undo()   # back to []
        store.redo()   # [cut] again
    """

    def __init__(
        self,
        decisions: Iterable[EditDecision] = (),
        max_history: int | None = None,
    ):
        self._decisions: Snapshot = tuple(decisions)
        self._undo_stack: list[Snapshot] = []
        self._redo_stack: list[Snapshot] = []
        self.max_history = max_history

    @property
    def decisions(self) -> Snapshot:
        return self._decisions

    def __len__(self) -> int:
        return len(self._decisions)

    def __iter__(self):
        return iter(self._decisions)

    def get(self, decision_id: str) -> EditDecision | None:
        return next((d for d in self._decisions if d.id == decision_id), None)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def _commit(self, new_state: Snapshot) -> None:
        self._undo_stack.append(self._decisions)
        if self.max_history is not None and len(self._undo_stack) > self.max_history:
            del self._undo_stack[: len(self._undo_stack) - self.max_history]
        self._redo_stack.clear()
        self._decisions = new_state

    def add(self, decisions: Iterable[EditDecision]) -> list[EditDecision]:
        """Append *decisions* as a single undo step.

        Returns the decisions actually added; ids already in the store are
        skipped.
        """
        seen = {d.id for d in self._decisions}
        added: list[EditDecision] = []
        for d in decisions:
            if d.id in seen:
                logger.warning("Skipping edit decision with duplicate id %s", d.id)
                continue
            seen.add(d.id)
            added.append(d)

        if not added:
            return []

        self._commit(self._decisions + tuple(added))
        logger.debug("Added %d edit decisions (%d total)", len(added), len(self._decisions))
        return added

    def remove(self, decision_id: str) -> bool:
        """Remove the decision with *decision_id*; unknown ids are a no-op."""
        remaining = tuple(d for d in self._decisions if d.id != decision_id)
        if len(remaining) == len(self._decisions):
            return False
        self._commit(remaining)
        return True

    def clear(self) -> bool:
        if not self._decisions:
            return False
        self._commit(())
        return True

    def undo(self) -> bool:
        if not self._undo_stack:
            return False
        self._redo_stack.append(self._decisions)
        self._decisions = self._undo_stack.pop()
        return True

    def redo(self) -> bool:
        if not self._redo_stack:
            return False
        self._undo_stack.append(self._decisions)
        self._decisions = self._redo_stack.pop()
        return True
