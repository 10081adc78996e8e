"""
Container: creates and holds singletons.

Provides:
- Storage + stores (retrieval/*)
- Text generator (connectors/openai_text.py), swappable for tests
- context(): per-request RemixContext handed to service.remix
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app.config import Settings

# Retrieval layer
from retrieval.storage import Storage
from retrieval.saved_responses_store import SavedResponsesStore
from retrieval.custom_styles_store import CustomStylesStore

# External collaborators
from connectors import make_generator

from service import GeneratorLike, RemixContext
from service.prompt_composer import SYSTEM_PROMPT


@dataclass
class Container:
    settings: Settings
    generator: Optional[GeneratorLike] = None

    def __post_init__(self):
        # ---------- Retrieval layer ----------
        self.storage = Storage(Path(self.settings.DATA_DIR))
        self.saved = SavedResponsesStore(self.storage)
        self.styles = CustomStylesStore(self.storage)

        # ---------- Generation ----------
        if self.generator is None:
            self.generator = make_generator(self.settings, system_prompt=SYSTEM_PROMPT)

    def context(self, request_id: str = "-") -> RemixContext:
        return RemixContext(
            generator=self.generator,  # type: ignore[arg-type]
            saved=self.saved,
            styles=self.styles,
            max_tokens=self.settings.MAX_OUTPUT_TOKENS,
            backfill_attempts=self.settings.BACKFILL_ATTEMPTS,
            batch_size=self.settings.BATCH_SIZE,
            request_id=request_id,
        )
