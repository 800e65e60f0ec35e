"""
Purpose:
- Reduce a free-form "suggest some emojis" model reply to just the emoji tokens.

How:
- Blank out ASCII letters/digits and common punctuation, split on whitespace,
  keep tokens that carry at least one pictographic code point.
- Splitting on whitespace (not code points) keeps ZWJ / variation-selector
  sequences like "🏖️" or "👩‍🍳" together as one token.
"""

from __future__ import annotations
import re
from typing import List, Optional, Tuple

# Extended_Pictographic (Unicode emoji-data) plus the whole 1F300-1FAFF and 2600-27BF blocks,
# which also pulls in symbol/dingbat emoji outside the pictographic property.
_PICTO_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x00A9, 0x00A9), (0x00AE, 0x00AE), (0x203C, 0x203C), (0x2049, 0x2049),
    (0x2122, 0x2122), (0x2139, 0x2139), (0x2194, 0x2199), (0x21A9, 0x21AA),
    (0x231A, 0x231B), (0x2328, 0x2328), (0x2388, 0x2388), (0x23CF, 0x23CF),
    (0x23E9, 0x23F3), (0x23F8, 0x23FA), (0x24C2, 0x24C2), (0x25AA, 0x25AB),
    (0x25B6, 0x25B6), (0x25C0, 0x25C0), (0x25FB, 0x25FE),
    (0x2600, 0x27BF),
    (0x2934, 0x2935), (0x2B05, 0x2B07), (0x2B1B, 0x2B1C), (0x2B50, 0x2B50),
    (0x2B55, 0x2B55), (0x3030, 0x3030), (0x303D, 0x303D), (0x3297, 0x3297),
    (0x3299, 0x3299),
    (0x1F000, 0x1F0FF), (0x1F10D, 0x1F10F), (0x1F12F, 0x1F12F), (0x1F16C, 0x1F171),
    (0x1F17E, 0x1F17F), (0x1F18E, 0x1F18E), (0x1F191, 0x1F19A), (0x1F1AD, 0x1F1E5),
    (0x1F201, 0x1F20F), (0x1F21A, 0x1F21A), (0x1F22F, 0x1F22F), (0x1F232, 0x1F23A),
    (0x1F23C, 0x1F23F), (0x1F249, 0x1F2FF),
    (0x1F300, 0x1FAFF),
    (0x1FC00, 0x1FFFD),
)
_PICTO = re.compile(
    "[" + "".join(f"{chr(lo)}-{chr(hi)}" for lo, hi in _PICTO_RANGES) + "]"
)

# ASCII letters, digits and the punctuation models like to wrap emojis in
_NOISE = re.compile(r"""[A-Za-z0-9,.;:()"'`~_-]""")

def is_emojiish(token: str) -> bool:
    return bool(_PICTO.search(token))

def extract_emojis_only(raw: Optional[str], max_count: int = 5) -> List[str]:
    if not raw:
        return []
    cleaned = re.sub(r"\s+", " ", _NOISE.sub(" ", raw)).strip()
    tokens = [t for t in cleaned.split(" ") if t]
    return [t for t in tokens if is_emojiish(t)][: max(0, max_count)]
