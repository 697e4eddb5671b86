"""Dialog module."""

from .engine import DialogEngine, IDialogEngine
from .replies import SUPPORTED_LOCALES, Replies

__all__ = ["DialogEngine", "IDialogEngine", "Replies", "SUPPORTED_LOCALES"]
