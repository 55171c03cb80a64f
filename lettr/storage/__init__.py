"""
Submodule for all storage logic.
Backed by pluggable storage implementations (e.g., TinyDB).
"""

from .base_storage import EngagementStore, TinyDBStorageService
from .lettr_storage import LettrStorage

__all__ = [
    "EngagementStore",
    "TinyDBStorageService",
    "LettrStorage",
]
