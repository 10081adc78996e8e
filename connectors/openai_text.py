"""
OpenAI text generation connector.

- generate(instruction, params) -> str
- Uses the chat completions API with a single user message
  (plus an optional system prompt)
- No retries here: the client is built with max_retries=0 so the only
  follow-up call is the variation backfill in service/variations.py

Errors:
- GenerationError("No response generated") when the model returns no content
- any openai.OpenAIError → GenerationError carrying the provider's message
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from service import GenerationParams

logger = logging.getLogger("Remix")

DEFAULT_MODEL = "gpt-3.5-turbo"


class GenerationError(Exception):
    pass


class OpenAITextGenerator:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = DEFAULT_MODEL,
        system_prompt: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        self.client = client or OpenAI(api_key=api_key, max_retries=0)
        self.model = model
        self.system_prompt = system_prompt

    def _messages(self, instruction: str) -> List[Dict[str, str]]:
        msgs: List[Dict[str, str]] = []
        if self.system_prompt:
            msgs.append({"role": "system", "content": self.system_prompt})
        msgs.append({"role": "user", "content": instruction})
        return msgs

    def generate(self, instruction: str, params: GenerationParams) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(instruction),
                temperature=params.temperature,
                max_tokens=params.max_tokens,
                presence_penalty=params.presence_penalty,
                frequency_penalty=params.frequency_penalty,
            )
        except OpenAIError as exc:
            logger.exception("OpenAI call failed (model=%s)", self.model)
            raise GenerationError(str(exc) or "Something went wrong") from exc

        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise GenerationError("No response generated")
        return content
