"""Editing session and undo history."""

from .extraction_session import ExtractionSession
from .history_manager import HistoryManager

__all__ = [
    "ExtractionSession",
    "HistoryManager",
]
