"""
Purpose:
- Turn loosely-typed multipart form fields into a typed CaptionOptions.
- Everything unrecognized falls back to a default here so the composer never
  sees a raw wire string.

Field shapes accepted (mirrors what the browser client sends):
- lists: JSON array string, comma-separated string, or omitted
- booleans: "true"/"false" strings
- enums: case-insensitive names, default on anything else
"""

from __future__ import annotations
import json
from typing import Any, List, Mapping, Optional, Tuple

from .composer import CaptionOptions, Length, Placement, Voice

EMOJI_COUNT_DEFAULT = 2
EMOJI_COUNT_MIN = 1
EMOJI_COUNT_MAX = 8

def _split_commas(raw: str) -> List[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]

def parse_list_field(raw: Any, *, comma_fallback: bool = True) -> List[str]:
    """
    `comma_fallback=False` is the keywords behavior: anything that is not a JSON
    array is dropped instead of being split on commas.
    """
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(x) for x in raw]
    text = str(raw)
    try:
        parsed = json.loads(text)
    except ValueError:
        return _split_commas(text) if comma_fallback else []
    if isinstance(parsed, list):
        return [str(x) for x in parsed]
    return _split_commas(text) if comma_fallback else []

def parse_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    return str(raw).strip().lower() == "true"

def parse_emoji_count(raw: Any) -> int:
    try:
        n = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        n = EMOJI_COUNT_DEFAULT
    return min(EMOJI_COUNT_MAX, max(EMOJI_COUNT_MIN, n))

def build_options(form: Mapping[str, Any], emojis: Optional[List[str]] = None) -> Tuple[CaptionOptions, int]:
    """
    Returns (options, emoji_count). `emojis` is usually empty here; the pipeline
    fills it in after asking the generator for suggestions.
    """
    location = str(form.get("location") or "").strip()
    opts = CaptionOptions(
        tone=str(form.get("tone") or "casual"),
        keywords=parse_list_field(form.get("keywords"), comma_fallback=False),
        hashtags=parse_list_field(form.get("hashtags")),
        include_hashtags=parse_bool(form.get("includeHashtags"), True),
        include_mentions=parse_bool(form.get("includeMentions"), False),
        include_emojis=parse_bool(form.get("includeEmojis"), False),
        include_location=parse_bool(form.get("includeLocation"), True),
        location=location or None,
        handles=parse_list_field(form.get("handles")),
        voice=Voice.parse(form.get("voice"), Voice.NEUTRAL),
        length=Length.parse(form.get("length"), Length.MEDIUM),
        emojis=emojis or [],
        emoji_placement=Placement.parse(form.get("emojiPlacement"), Placement.END),
        hashtags_placement=Placement.parse(form.get("hashtagsPlacement"), Placement.END),
        mentions_placement=Placement.parse(form.get("mentionsPlacement"), Placement.END),
    )
    count = EMOJI_COUNT_DEFAULT if form.get("emojiCount") is None else parse_emoji_count(form.get("emojiCount"))
    return opts, count
