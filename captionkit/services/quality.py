"""
Purpose:
- Cheap heuristic gate for generated text: is this paraphrase usable, or do we
  fall back to the base caption?
- Non-blocking: this never raises; callers decide what to do with the verdict.

Extensibility:
- Add observed failure phrases to BAD_HINTS (matched case-insensitively).
"""

from __future__ import annotations
from typing import Optional, Tuple

MIN_CHARS = 3

# Fragments seen when the paraphrase model answers with meta-instructions instead of a caption
BAD_HINTS: Tuple[str, ...] = (
    "text editor",
    "article",
    "there is no other way",
    "first two lines",
)

def looks_bad(candidate: Optional[str], prompt: Optional[str]) -> bool:
    """Return True when `candidate` should be rejected."""
    if not candidate:
        return True
    if len(candidate) < MIN_CHARS:
        return True
    low = candidate.lower()
    # model echoed its instructions back
    if prompt and low.startswith(prompt.lower()):
        return True
    return any(h in low for h in BAD_HINTS)
