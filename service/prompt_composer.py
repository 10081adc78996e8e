"""
Prompt composer: styles + intensity + source text -> instruction + sampling params.

Variants:
- compose_single(...)   one rewrite in a single style        (temperature 0.7)
- compose_simple(...)   4 variations in a single style       (temperature 0.9)
- compose_blend(...)    4 variations blending weighted styles (params from intensity)
- compose_backfill(...) top-up request for a short response  (hotter than its base)

Intensity (1..10) maps linearly onto the sampling parameters:
    temperature       = 0.3 + intensity * 0.07   (0.37 .. 1.0)
    presence_penalty  = 0.2 + intensity * 0.05   (0.25 .. 0.7)
    frequency_penalty = 0.3 + intensity * 0.04   (0.34 .. 0.7)
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

from service import GenerationParams
from service.style_weights import StyleWeight
from service.validators import ValidationError

VARIATION_COUNT = 4
DEFAULT_INTENSITY = 5
MIN_INTENSITY, MAX_INTENSITY = 1, 10
DEFAULT_MAX_TOKENS = 1000

SINGLE_TEMPERATURE = 0.7
SIMPLE_TEMPERATURE = 0.9
BACKFILL_TEMPERATURE_STEP = 0.15
BACKFILL_TEMPERATURE_CEILING = 1.2

SYSTEM_PROMPT = (
    "You are a skilled content writer who specializes in creating variations "
    "of existing content while maintaining the core message."
)

# Built-in tones. ids are what clients send; descriptions go into prompts.
BASE_TONES: List[Dict[str, str]] = [
    {"id": "professional", "label": "Professional", "description": "Formal and business-appropriate tone"},
    {"id": "casual", "label": "Casual", "description": "Relaxed and conversational tone"},
    {"id": "funny", "label": "Funny", "description": "Adds humor and wit to your text"},
    {"id": "poetic", "label": "Poetic", "description": "Lyrical and artistic expression"},
]

STYLE_DESCRIPTIONS: Dict[str, str] = {
    "funny": "with humor, wit and playful wordplay",
    "professional": "in a formal, polished business tone",
    "poetic": "with lyrical rhythm and vivid imagery",
    "casual": "in a relaxed, conversational tone",
}

_RANK_LABELS = ("Primary style", "Secondary influence")
_SUBTLE_LABEL = "Subtle influence"

_FORMAT_RULES = (
    "Format each variation as a separate paragraph, separated by a blank line, "
    "without any numbering, labels or prefixes. "
    "Preserve the core message of the original text. "
    "Return only the rewritten text: no commentary, markdown, code or other non-text output."
)

StyleLookup = Callable[[str], Optional[Dict[str, Any]]]


@dataclass(frozen=True)
class ComposedPrompt:
    instruction: str
    params: GenerationParams
    count: int
    style_clause: str
    text: str


# ---- style descriptions ----

def describe_style(style_id: str, lookup: Optional[StyleLookup] = None) -> str:
    key = (style_id or "").strip()
    if key.lower() in STYLE_DESCRIPTIONS:
        return STYLE_DESCRIPTIONS[key.lower()]
    custom = lookup(key) if lookup else None
    if custom and custom.get("isEnabled", True):
        name = custom.get("name") or key
        out = f'in a "{name}" style'
        if custom.get("description"):
            out = f"{out} ({custom['description'].strip()})"
        base = STYLE_DESCRIPTIONS.get((custom.get("baseTone") or "").lower())
        if base:
            out = f"{out}, {base}"
        return out
    return f"in a {key} style"


def rank_label(index: int) -> str:
    return _RANK_LABELS[index] if index < len(_RANK_LABELS) else _SUBTLE_LABEL


# ---- intensity ----

def check_intensity(value: Any) -> int:
    if value is None:
        return DEFAULT_INTENSITY
    if isinstance(value, bool):
        raise ValidationError("intensity must be an integer from 1 to 10")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or not MIN_INTENSITY <= value <= MAX_INTENSITY:
        raise ValidationError("intensity must be an integer from 1 to 10")
    return value


def params_for_intensity(intensity: int, max_tokens: int = DEFAULT_MAX_TOKENS) -> GenerationParams:
    return GenerationParams(
        temperature=round(0.3 + intensity * 0.07, 4),
        max_tokens=max_tokens,
        presence_penalty=round(0.2 + intensity * 0.05, 4),
        frequency_penalty=round(0.3 + intensity * 0.04, 4),
    )


def intensity_guidance(intensity: int) -> str:
    if intensity <= 3:
        return "keep changes minimal"
    if intensity >= 8:
        return "be highly creative"
    return "balance creativity with original structure"


# ---- composers ----

def compose_single(text: str, style: str, *, lookup: Optional[StyleLookup] = None,
                   max_tokens: int = DEFAULT_MAX_TOKENS) -> ComposedPrompt:
    clause = describe_style(style, lookup)
    instruction = (
        f"Rewrite the following text {clause}. Make it distinct and engaging. "
        "Preserve the core message and return only the rewritten text, "
        f"with no commentary or other non-text output:\n\n{text}"
    )
    return ComposedPrompt(
        instruction=instruction,
        params=GenerationParams(temperature=SINGLE_TEMPERATURE, max_tokens=max_tokens),
        count=1,
        style_clause=clause,
        text=text,
    )


def compose_simple(text: str, style: str, *, lookup: Optional[StyleLookup] = None,
                   max_tokens: int = DEFAULT_MAX_TOKENS) -> ComposedPrompt:
    clause = describe_style(style, lookup)
    instruction = (
        f"Generate exactly {VARIATION_COUNT} unique and creative variations of the following text {clause}. "
        f"Make each variation distinct and engaging. {_FORMAT_RULES}\n\n{text}"
    )
    return ComposedPrompt(
        instruction=instruction,
        params=GenerationParams(temperature=SIMPLE_TEMPERATURE, max_tokens=max_tokens),
        count=VARIATION_COUNT,
        style_clause=clause,
        text=text,
    )


def _blend_clause(styles: List[StyleWeight], lookup: Optional[StyleLookup]) -> str:
    lines = [
        f"- {rank_label(i)} ({s.weight}%): {describe_style(s.id, lookup)}"
        for i, s in enumerate(styles)
    ]
    return "blending these styles:\n" + "\n".join(lines)


def compose_blend(text: str, styles: List[StyleWeight], intensity: int = DEFAULT_INTENSITY, *,
                  lookup: Optional[StyleLookup] = None,
                  max_tokens: int = DEFAULT_MAX_TOKENS) -> ComposedPrompt:
    """
    `styles` must already be ordered primary-first (see normalize_styles).
    """
    if not styles:
        raise ValidationError("at least one style is required")
    intensity = check_intensity(intensity)
    clause = _blend_clause(styles, lookup)
    instruction = (
        f"Rewrite the following text {clause}\n\n"
        f"Intensity {intensity}/{MAX_INTENSITY}: {intensity_guidance(intensity)}.\n\n"
        f"Generate exactly {VARIATION_COUNT} distinct variations. {_FORMAT_RULES}\n\n"
        f"Text:\n{text}"
    )
    return ComposedPrompt(
        instruction=instruction,
        params=params_for_intensity(intensity, max_tokens),
        count=VARIATION_COUNT,
        style_clause=clause,
        text=text,
    )


def compose_backfill(base: ComposedPrompt, shortfall: int, existing: Optional[List[str]] = None) -> ComposedPrompt:
    noun = "variation" if shortfall == 1 else "variations"
    avoid = ""
    if existing:
        quoted = "\n\n".join(existing)
        avoid = f"\n\nThey must differ from these existing variations:\n\n{quoted}"
    instruction = (
        f"Generate exactly {shortfall} more distinct {noun} of the following text {base.style_clause}\n\n"
        f"{_FORMAT_RULES}{avoid}\n\nText:\n{base.text}"
    )
    hotter = min(base.params.temperature + BACKFILL_TEMPERATURE_STEP, BACKFILL_TEMPERATURE_CEILING)
    return ComposedPrompt(
        instruction=instruction,
        params=replace(base.params, temperature=round(hotter, 4)),
        count=shortfall,
        style_clause=base.style_clause,
        text=base.text,
    )
