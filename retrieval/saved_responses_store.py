"""
SavedResponsesStore
- Persists saved variations in {DATA_DIR}/saved_responses.json
- Record shape:
  { "id": "9f1c...", "text": "...", "style": "funny", "timestamp": "2024-05-01T10:00:00.000Z" }
- id and timestamp are assigned here, never by the caller
- No transactions or conflict handling; last writer wins
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List

from retrieval.storage import Storage, utc_now_iso

logger = logging.getLogger("Storage")

FILENAME = "saved_responses.json"

RECORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["id", "text", "style", "timestamp"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "text": {"type": "string"},
        "style": {"type": "string"},
        "timestamp": {"type": "string"},
    },
}


@dataclass
class SavedResponsesStore:
    storage: Storage

    def store(self, record: Dict[str, Any]) -> str:
        """
        Insert {text, style}; returns the new id.
        """
        rec = {
            "id": uuid.uuid4().hex,
            "text": str(record.get("text", "")),
            "style": str(record.get("style", "")),
            "timestamp": utc_now_iso(),
        }
        self.storage.update_list(FILENAME, lambda items: items.append(rec), schema=RECORD_SCHEMA)
        logger.info("saved response %s (style=%s)", rec["id"], rec["style"])
        return rec["id"]

    def get(self, response_id: str) -> Dict[str, Any] | None:
        for item in self.storage.read_list(FILENAME):
            if item.get("id") == response_id:
                return item
        return None

    def list(self) -> List[Dict[str, Any]]:
        """
        All saved responses, newest first. Equal timestamps keep later inserts first.
        """
        items = self.storage.read_list(FILENAME)
        indexed = list(enumerate(items))
        indexed.sort(key=lambda p: (p[1].get("timestamp") or "", p[0]), reverse=True)
        return [item for _, item in indexed]

    def remove(self, response_id: str) -> bool:
        def _drop(items: List[Dict[str, Any]]) -> bool:
            before = len(items)
            items[:] = [i for i in items if i.get("id") != response_id]
            return len(items) != before

        removed = self.storage.update_list(FILENAME, _drop)
        if removed:
            logger.info("deleted saved response %s", response_id)
        return removed
