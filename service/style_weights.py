"""
Style weight normalization.

A request blends one or more styles, each with an integer percentage weight.
Totals may never exceed 100. For composition the styles are ordered by weight,
highest first; the first entry is the primary style. The sort is stable, so
equal weights keep the order they were given in.

StyleSelection is the editable form used when a selection is built up one
style at a time: rejected edits leave every weight as it was.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from service.validators import STYLE_WEIGHTS_SCHEMA, ValidationError, ensure_valid

MAX_TOTAL = 100


@dataclass(frozen=True)
class StyleWeight:
    id: str
    weight: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "weight": self.weight}


def order_by_weight(weights: List[StyleWeight]) -> List[StyleWeight]:
    return sorted(weights, key=lambda w: w.weight, reverse=True)


def normalize_styles(items: Any) -> List[StyleWeight]:
    """
    Validate a [{id, weight}] payload and return it ordered primary-first.
    """
    if not isinstance(items, list):
        raise ValidationError("styles must be a list of {id, weight}")
    ensure_valid(items, schema=STYLE_WEIGHTS_SCHEMA)

    out: List[StyleWeight] = []
    seen = set()
    for it in items:
        sid = it["id"].strip()
        if not sid:
            raise ValidationError("style id must not be blank")
        if sid in seen:
            raise ValidationError(f"duplicate style: {sid}")
        seen.add(sid)
        out.append(StyleWeight(sid, int(it["weight"])))

    total = sum(w.weight for w in out)
    if total > MAX_TOTAL:
        raise ValidationError(f"style weights total {total}%, must not exceed {MAX_TOTAL}%")
    return order_by_weight(out)


def single_style(style_id: str) -> List[StyleWeight]:
    return [StyleWeight(style_id, MAX_TOTAL)]


class StyleSelection:
    def __init__(self, weights: Optional[List[StyleWeight]] = None):
        self._weights: Dict[str, int] = {}
        for w in weights or []:
            if not self.add(w.id, w.weight):
                raise ValidationError(f"cannot add {w.id} at {w.weight}%")

    def total(self) -> int:
        return sum(self._weights.values())

    def weight_of(self, style_id: str) -> Optional[int]:
        return self._weights.get(style_id)

    def add(self, style_id: str, weight: Optional[int] = None) -> bool:
        """
        Add a style. Without a weight it takes whatever share is still unallocated.
        """
        if style_id in self._weights:
            return False
        w = MAX_TOTAL - self.total() if weight is None else int(weight)
        if w < 0 or self.total() + w > MAX_TOTAL:
            return False
        self._weights[style_id] = w
        return True

    def set_weight(self, style_id: str, weight: int) -> bool:
        if style_id not in self._weights or weight < 0:
            return False
        proposed = self.total() - self._weights[style_id] + weight
        if proposed > MAX_TOTAL:
            return False
        self._weights[style_id] = weight
        return True

    def remove(self, style_id: str) -> bool:
        return self._weights.pop(style_id, None) is not None

    def ordered(self) -> List[StyleWeight]:
        return order_by_weight([StyleWeight(k, v) for k, v in self._weights.items()])

    def as_dict(self) -> Dict[str, int]:
        return dict(self._weights)
