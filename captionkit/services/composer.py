"""
Purpose:
- Deterministic caption composer: turn a core description + user preferences
  into a social-media-ready caption.
- Pure string-in/string-out; no model calls, no I/O.

Steps (order matters):
1) drop a leading "A"/"The" article
2) build emoji / mentions+location / hashtag segments
3) splice segments into the word list (beginning -> middle -> end)
4) join, 5) inject voice, 6) cap word count, 7) tidy punctuation spacing

Notes:
- "middle" is recomputed against the list as it is at insertion time, so the
  fixed segment order (emoji -> mentions/location -> hashtags) is part of the
  observable output.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

class _ParseableEnum(str, Enum):
    @classmethod
    def parse(cls, value, default):
        """Case-insensitive lookup; anything unrecognized becomes `default`."""
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower()
        for member in cls:
            if member.value == s:
                return member
        return cls(default)

class Placement(_ParseableEnum):
    BEGINNING = "beginning"
    MIDDLE = "middle"
    END = "end"

class Voice(_ParseableEnum):
    I = "i"
    WE = "we"
    NEUTRAL = "neutral"

class Length(_ParseableEnum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

# word-count ceilings shared by trim_to_length() and rule_based_caption()
LENGTH_CAPS: Dict[Length, int] = {
    Length.SHORT: 12,
    Length.MEDIUM: 25,
    Length.LONG: 60,
}

MAX_HASHTAGS = 8
LOCATION_PIN = "📍"

# slot processing order, then segment order inside a slot
_SLOT_ORDER: Tuple[Placement, ...] = (Placement.BEGINNING, Placement.MIDDLE, Placement.END)

_FIRST_PERSON_SINGULAR = re.compile(r"\b(I|I'm|I’m|I've|I’ve|me|my|mine)\b", re.IGNORECASE)
_FIRST_PERSON_PLURAL = re.compile(r"\b(we|we're|we’re|we've|we’ve|us|our|ours)\b", re.IGNORECASE)
_LEADING_A = re.compile(r"^a\s+", re.IGNORECASE)
_LEADING_THE = re.compile(r"^the\s+", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.!?;:])")
_WS = re.compile(r"\s+")


@dataclass(frozen=True)
class CaptionOptions:
    tone: str = "casual"
    keywords: Tuple[str, ...] = ()
    hashtags: Tuple[str, ...] = ()
    include_hashtags: bool = True
    include_mentions: bool = False
    include_emojis: bool = False
    # location renders independently of include_mentions; see DESIGN.md
    include_location: bool = True
    location: Optional[str] = None
    handles: Tuple[str, ...] = ()
    voice: Voice = Voice.NEUTRAL
    length: Length = Length.MEDIUM
    emojis: Tuple[str, ...] = ()
    emoji_placement: Placement = Placement.END
    hashtags_placement: Placement = Placement.END
    mentions_placement: Placement = Placement.END

    def __post_init__(self):
        # accept lists (and raw strings for the enums) but store immutable/typed values
        for name in ("keywords", "hashtags", "handles", "emojis"):
            object.__setattr__(self, name, tuple(str(x) for x in (getattr(self, name) or ())))
        object.__setattr__(self, "voice", Voice.parse(self.voice, Voice.NEUTRAL))
        object.__setattr__(self, "length", Length.parse(self.length, Length.MEDIUM))
        for name in ("emoji_placement", "hashtags_placement", "mentions_placement"):
            object.__setattr__(self, name, Placement.parse(getattr(self, name), Placement.END))

    def placements(self) -> Dict[str, str]:
        return {
            "hashtagsPlacement": self.hashtags_placement.value,
            "mentionsPlacement": self.mentions_placement.value,
            "emojiPlacement": self.emoji_placement.value,
        }


@dataclass(frozen=True)
class Segment:
    where: Placement
    content: str = field(default="")


def tagify(word: str) -> str:
    """'Sunny Day!' -> '#sunnyday'"""
    return "#" + _NON_ALNUM.sub("", (word or "").lower())

def ensure_voice(text: str, voice) -> str:
    """
    Prefix "I " / "We " unless the text already speaks in that voice.
    The text's first character is lowercased after the prefix.
    """
    voice = Voice.parse(voice, Voice.NEUTRAL)
    if voice is Voice.NEUTRAL:
        return text
    if voice is Voice.I and not _FIRST_PERSON_SINGULAR.search(text):
        return f"I {text[:1].lower()}{text[1:]}"
    if voice is Voice.WE and not _FIRST_PERSON_PLURAL.search(text):
        return f"We {text[:1].lower()}{text[1:]}"
    return text

def trim_to_length(text: str, length) -> str:
    max_words = LENGTH_CAPS[Length.parse(length, Length.MEDIUM)]
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]).strip()

def _strip_article(core: str) -> str:
    core = _LEADING_A.sub("", core or "")
    core = _LEADING_THE.sub("", core)
    return core.strip()

def _mentions_location_segment(opts: CaptionOptions) -> str:
    tokens: List[str] = []
    location = (opts.location or "").strip()
    if opts.include_location and location:
        tokens.append(f"{LOCATION_PIN}{location}")
    if opts.include_mentions and opts.handles:
        tokens.extend(h if h.startswith("@") else f"@{h}" for h in opts.handles)
    return " ".join(tokens).strip()

def _hashtags_segment(opts: CaptionOptions) -> str:
    if not (opts.include_hashtags and opts.hashtags):
        return ""
    return " ".join(tagify(h) for h in opts.hashtags[:MAX_HASHTAGS]).strip()

def _emoji_segment(opts: CaptionOptions) -> str:
    if not (opts.include_emojis and opts.emojis):
        return ""
    return " ".join(opts.emojis)

def build_segments(opts: CaptionOptions) -> List[Segment]:
    """Segments in their fixed insertion order; empty ones are kept here and skipped at placement."""
    return [
        Segment(opts.emoji_placement, _emoji_segment(opts)),
        Segment(opts.mentions_placement, _mentions_location_segment(opts)),
        Segment(opts.hashtags_placement, _hashtags_segment(opts)),
    ]

def place_segment(words: Sequence[str], segment: str, where: Placement) -> List[str]:
    out = list(words)
    if not segment.strip():
        return out
    if where is Placement.BEGINNING:
        at = 0
    elif where is Placement.END:
        at = len(out)
    else:
        at = max(1, len(out) // 2)
    out[at:at] = segment.split()
    return out

def rule_based_caption(core: str, opts: CaptionOptions) -> str:
    words = _strip_article(core).split()

    segments = build_segments(opts)
    for slot in _SLOT_ORDER:
        for seg in segments:
            if seg.where is slot and seg.content:
                words = place_segment(words, seg.content, slot)

    out = _WS.sub(" ", " ".join(words)).strip()
    out = ensure_voice(out, opts.voice)

    max_words = LENGTH_CAPS[opts.length]
    capped = out.split()
    if len(capped) > max_words:
        out = " ".join(capped[:max_words])

    return _SPACE_BEFORE_PUNCT.sub(r"\1", out).strip()
