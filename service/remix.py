"""
Remix orchestration.

Every entry point takes an explicit RemixContext (generator + stores + knobs)
and validated-or-raw request fields; nothing here touches Flask or globals.

Variants (POST /api/remix):
- single : one rewrite in one style            -> str
- simple : 4 variations in one style           -> VariationResult
- blend  : 4 variations from weighted styles   -> VariationResult
- batch  : N parallel single rewrites          -> list[str]  (POST /api/remix/batch)

Errors:
- ValidationError  bad/missing input (HTTP 400)
- GenerationError  upstream failure   (HTTP 500)
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from connectors.openai_text import GenerationError
from retrieval.storage import StorageError
from service import RemixContext
from service.batch import run_all
from service.prompt_composer import compose_blend, compose_simple, compose_single
from service.style_weights import normalize_styles, single_style
from service.validators import ValidationError, clean_text, sanitize_text
from service.variations import VariationResult, collect_variations

logger = logging.getLogger("Remix")

VARIANTS = ("single", "simple", "blend")
MAX_BATCH = 10


def pick_variant(data: Dict[str, Any]) -> str:
    """
    Explicit "variant" wins; otherwise infer from the body shape.
    """
    raw = data.get("variant")
    if raw is not None and not isinstance(raw, str):
        raise ValidationError(f"unknown variant: {raw!r}")
    v = (raw or "").strip().lower()
    if v:
        if v not in VARIANTS:
            raise ValidationError(f"unknown variant: {v}")
        return v
    if "styles" in data:
        return "blend"
    if "numVariations" in data:
        return "simple"
    return "single"


def _text_and_style(text: Any, style: Any) -> tuple[str, str]:
    t = clean_text(text)
    s = sanitize_text(style)
    if not t or not s:
        raise ValidationError("Missing text or style")
    return t, s


def _lookup(ctx: RemixContext):
    def lookup(style_id: str) -> Optional[Dict[str, Any]]:
        try:
            return ctx.lookup_style(style_id)
        except StorageError:
            logger.warning("custom style lookup failed for %s; using generic phrasing", style_id)
            return None
    return lookup


# ---- variants ----

def remix_single(ctx: RemixContext, text: Any, style: Any) -> str:
    t, s = _text_and_style(text, style)
    prompt = compose_single(t, s, lookup=_lookup(ctx), max_tokens=ctx.max_tokens)
    out = ctx.generator.generate(prompt.instruction, prompt.params).strip()
    if not out:
        raise GenerationError("No response generated")
    logger.info("single remix done (style=%s)", s)
    return out


def remix_simple(ctx: RemixContext, text: Any, style: Any) -> VariationResult:
    t, s = _text_and_style(text, style)
    prompt = compose_simple(t, s, lookup=_lookup(ctx), max_tokens=ctx.max_tokens)
    result = collect_variations(ctx.generator, prompt, max_backfills=ctx.backfill_attempts)
    logger.info("simple remix done (style=%s, %s variations)", s, len(result.variations))
    return result


def remix_blend(ctx: RemixContext, text: Any, styles: Any = None, intensity: Any = None,
                style: Any = None) -> VariationResult:
    t = clean_text(text)
    if not t:
        raise ValidationError("Missing text")
    if styles is None and style:
        ordered = single_style(sanitize_text(style))
    elif styles is None:
        raise ValidationError("Missing styles")
    else:
        ordered = normalize_styles(styles)
    prompt = compose_blend(t, ordered, intensity, lookup=_lookup(ctx), max_tokens=ctx.max_tokens)
    result = collect_variations(ctx.generator, prompt, max_backfills=ctx.backfill_attempts)
    logger.info(
        "blend remix done (primary=%s, styles=%s, %s variations, backfills=%s)",
        ordered[0].id, len(ordered), len(result.variations), result.backfill_calls,
    )
    return result


def remix_batch(ctx: RemixContext, text: Any, style: Any, count: Any = None) -> List[str]:
    t, s = _text_and_style(text, style)
    n = ctx.batch_size if count is None else count
    if isinstance(n, bool) or not isinstance(n, int) or not 1 <= n <= MAX_BATCH:
        raise ValidationError(f"count must be an integer from 1 to {MAX_BATCH}")
    return run_all([lambda: remix_single(ctx, t, s) for _ in range(n)], max_workers=n)
