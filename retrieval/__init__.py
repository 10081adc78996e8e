"""
Retrieval package convenience exports.

Provides:
- Storage: atomic JSON collections under DATA_DIR
- SavedResponsesStore: saved variations (newest first)
- CustomStylesStore: user-defined styles
"""

from __future__ import annotations

from .storage import Storage, StorageError
from .saved_responses_store import SavedResponsesStore
from .custom_styles_store import CustomStylesStore

__all__ = [
    "Storage",
    "StorageError",
    "SavedResponsesStore",
    "CustomStylesStore",
]
