"""
CustomStylesStore
- User-defined styles in {DATA_DIR}/custom_styles.json
- Record shape:
  {
    "id": "k3j9x2", "name": "Pirate", "description": "Talk like a pirate",
    "category": "Fun", "baseTone": "funny", "isEnabled": true,
    "createdAt": "2024-05-01T10:00:00.000Z"
  }
- Enabled custom styles can be selected by id in remix requests
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from retrieval.storage import Storage, utc_now_iso

logger = logging.getLogger("Storage")

FILENAME = "custom_styles.json"

EDITABLE_FIELDS = ("name", "description", "category", "baseTone", "isEnabled")

RECORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["id", "name", "description", "category", "baseTone", "isEnabled", "createdAt"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "category": {"type": "string"},
        "baseTone": {"type": "string", "minLength": 1},
        "isEnabled": {"type": "boolean"},
        "createdAt": {"type": "string"},
    },
}


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class CustomStylesStore:
    storage: Storage
    default_tone: str = "professional"

    # -------- read --------

    def list(self, category: Optional[str] = None, query: Optional[str] = None) -> List[Dict[str, Any]]:
        items = self.storage.read_list(FILENAME)
        q = (query or "").strip().lower()
        out = []
        for s in items:
            if category and category != "all" and s.get("category") != category:
                continue
            if q and q not in s.get("name", "").lower() and q not in s.get("description", "").lower():
                continue
            out.append(s)
        return out

    def categories(self) -> List[str]:
        seen: List[str] = []
        for s in self.storage.read_list(FILENAME):
            c = s.get("category")
            if c and c not in seen:
                seen.append(c)
        return seen

    def get(self, style_id: str) -> Optional[Dict[str, Any]]:
        for s in self.storage.read_list(FILENAME):
            if s.get("id") == style_id:
                return s
        return None

    # -------- write --------

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        rec = {
            "id": _new_id(),
            "name": (data.get("name") or "").strip() or "Untitled Style",
            "description": data.get("description") or "",
            "category": (data.get("category") or "").strip() or "Uncategorized",
            "baseTone": data.get("baseTone") or self.default_tone,
            "isEnabled": bool(data.get("isEnabled", True)),
            "createdAt": utc_now_iso(),
        }
        self.storage.update_list(FILENAME, lambda items: items.append(rec), schema=RECORD_SCHEMA)
        logger.info("created custom style %s (%s)", rec["id"], rec["name"])
        return rec

    def update(self, style_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        def _apply(items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
            for s in items:
                if s.get("id") == style_id:
                    for k in EDITABLE_FIELDS:
                        if k not in data or data[k] is None:
                            continue
                        if k in ("name", "category") and not str(data[k]).strip():
                            continue  # blank keeps the current value
                        s[k] = data[k]
                    return dict(s)
            return None

        return self.storage.update_list(FILENAME, _apply, schema=RECORD_SCHEMA)

    def duplicate(self, style_id: str) -> Optional[Dict[str, Any]]:
        def _copy(items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
            for s in items:
                if s.get("id") == style_id:
                    dup = {**s, "id": _new_id(), "name": f"{s.get('name', '')} (Copy)", "createdAt": utc_now_iso()}
                    items.append(dup)
                    return dup
            return None

        return self.storage.update_list(FILENAME, _copy, schema=RECORD_SCHEMA)

    def remove(self, style_id: str) -> bool:
        def _drop(items: List[Dict[str, Any]]) -> bool:
            before = len(items)
            items[:] = [s for s in items if s.get("id") != style_id]
            return len(items) != before

        return self.storage.update_list(FILENAME, _drop)
