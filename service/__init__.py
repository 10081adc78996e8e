"""
Service package exports.

Exposes:
- GenerationParams: sampling knobs passed to the text generator
- protocol types for DI hints (generator, saved responses, custom styles)
- RemixContext: explicit per-request capabilities handed to service.remix
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_tokens: int = 1000
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0


# ---- Protocols (for type-hints / DI) ----


class GeneratorLike(Protocol):
    def generate(self, instruction: str, params: GenerationParams) -> str: ...


class SavedResponsesLike(Protocol):
    def store(self, record: Dict[str, Any]) -> str: ...
    def get(self, response_id: str) -> Optional[Dict[str, Any]]: ...
    def list(self) -> List[Dict[str, Any]]: ...
    def remove(self, response_id: str) -> bool: ...


class CustomStylesLike(Protocol):
    def get(self, style_id: str) -> Optional[Dict[str, Any]]: ...


# ---- Request context ----


@dataclass(frozen=True)
class RemixContext:
    generator: GeneratorLike
    saved: Optional[SavedResponsesLike] = None
    styles: Optional[CustomStylesLike] = None
    max_tokens: int = 1000
    backfill_attempts: int = 1
    batch_size: int = 3
    request_id: str = "-"

    def lookup_style(self, style_id: str) -> Optional[Dict[str, Any]]:
        if self.styles is None:
            return None
        return self.styles.get(style_id)
