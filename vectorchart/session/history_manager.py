"""Undo/redo history of data table states."""

import logging
from typing import List, Optional

from ..models.data_table import DataTable


logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Snapshot stacks for one extraction session.

    Callers take a restore point right before mutating the table. Undo
    and redo exchange the current table for a stored clone and keep a clone
    of the current one on the opposite stack.
    """

    def __init__(self):
        self.undo_history: List[DataTable] = []
        self.redo_history: List[DataTable] = []

    def clear(self) -> None:
        self.undo_history = []
        self.redo_history = []

    @property
    def can_undo(self) -> bool:
        return len(self.undo_history) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.redo_history) > 0

    def add_restore_point(self, table: DataTable) -> None:
        """Store a clone of ``table``; the redo history no longer applies."""
        self.push(table.clone())

    def push(self, snapshot: DataTable) -> None:
        """Store a clone taken earlier, once the change it precedes is known
        to have happened."""
        self.undo_history.append(snapshot)
        self.redo_history = []
        logger.debug(f"Restore point added ({len(self.undo_history)} in history)")

    def undo(self, current: DataTable) -> Optional[DataTable]:
        """Previous state, or None when there is nothing to undo."""
        if not self.can_undo:
            return None
        state = self.undo_history.pop()
        self.redo_history.append(current.clone())
        logger.info("Undo")
        return state

    def redo(self, current: DataTable) -> Optional[DataTable]:
        """State undone last, or None when there is nothing to redo."""
        if not self.can_redo:
            return None
        state = self.redo_history.pop()
        self.undo_history.append(current.clone())
        logger.info("Redo")
        return state
