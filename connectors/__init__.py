"""
Connectors package exports.

Factories:
- make_generator(settings) -> OpenAITextGenerator

Thin adapters over external APIs; prompt building lives in service/.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .openai_text import GenerationError, OpenAITextGenerator

if TYPE_CHECKING:
    from app.config import Settings


def make_generator(settings: "Settings", *, system_prompt: str | None = None) -> OpenAITextGenerator:
    """
    Build the OpenAI-backed generator from settings (OPENAI_API_KEY, OPENAI_MODEL).
    """
    return OpenAITextGenerator(settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL, system_prompt=system_prompt)


__all__ = ["GenerationError", "OpenAITextGenerator", "make_generator"]
