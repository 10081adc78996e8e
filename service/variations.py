"""
Variation splitter / backfill.

The generator returns free text; variations are paragraphs separated by blank
lines. collect_variations() turns one response into `count` variations:

    INITIAL_CALL --(>= count)--------------------------> DONE
    INITIAL_CALL --(< count)--> BACKFILL_CALL (x N) ---> DONE

N is bounded (default 1). Backfilled paragraphs are appended after the
originals, never in front of them. If the result is still short after the last
backfill it is returned as a partial result (complete=False) with the shortfall
recorded, so callers can tell it apart from a full set.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from service import GeneratorLike
from service.prompt_composer import ComposedPrompt, compose_backfill

logger = logging.getLogger("Remix")

_BLANK_LINE = re.compile(r"\n[ \t]*\n")


def split_variations(raw: str, limit: int) -> List[str]:
    """
    Split on blank lines, trim, drop empty chunks, keep the first `limit`.
    """
    text = (raw or "").replace("\r\n", "\n")
    chunks = [c.strip() for c in _BLANK_LINE.split(text)]
    return [c for c in chunks if c][:max(0, limit)]


@dataclass
class VariationResult:
    variations: List[str]
    requested: int
    backfill_calls: int = 0

    @property
    def shortfall(self) -> int:
        return max(0, self.requested - len(self.variations))

    @property
    def complete(self) -> bool:
        return self.shortfall == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variations": list(self.variations),
            "complete": self.complete,
            "shortfall": self.shortfall,
            "backfill_calls": self.backfill_calls,
        }


BackfillComposer = Callable[[ComposedPrompt, int, List[str]], ComposedPrompt]


def collect_variations(
    generator: GeneratorLike,
    prompt: ComposedPrompt,
    *,
    max_backfills: int = 1,
    backfill: BackfillComposer = compose_backfill,
) -> VariationResult:
    """
    Issue the initial call and, while short, up to `max_backfills` top-up calls.
    GenerationError from any call propagates unchanged.
    """
    raw = generator.generate(prompt.instruction, prompt.params)
    result = VariationResult(variations=split_variations(raw, prompt.count), requested=prompt.count)

    while not result.complete and result.backfill_calls < max_backfills:
        missing = result.shortfall
        logger.info("short response: %s/%s variations, backfilling %s",
                    len(result.variations), result.requested, missing)
        follow_up = backfill(prompt, missing, list(result.variations))
        extra_raw = generator.generate(follow_up.instruction, follow_up.params)
        result.backfill_calls += 1
        result.variations.extend(split_variations(extra_raw, missing))
        result.variations = result.variations[:result.requested]

    if not result.complete:
        logger.warning("returning partial result: %s/%s variations after %s backfill call(s)",
                       len(result.variations), result.requested, result.backfill_calls)
    return result
