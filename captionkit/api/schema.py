"""
Purpose:
- Pydantic models for caption in/out so the API is self-documenting and stable.
"""

from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

PlacementName = Literal["beginning", "middle", "end"]

class CaptionMeta(BaseModel):
    image_caption_model: str
    text_gen_model: str
    prompt: str
    source: Literal["model", "rule-based"]
    used_keywords: List[str] = []
    used_hashtags: List[str] = []
    used_emojis: List[str] = []
    placements: Dict[str, PlacementName] = {}

class CaptionResponse(BaseModel):
    caption: str = Field(..., description="Base model text (image -> text)")
    enhanced: str = Field(..., description="Final composed caption")
    meta: CaptionMeta

class ComposeOptionsIn(BaseModel):
    # same wire names the multipart endpoint uses
    tone: str = "casual"
    keywords: List[str] = []
    hashtags: List[str] = []
    includeHashtags: bool = True
    includeMentions: bool = False
    includeEmojis: bool = False
    includeLocation: bool = True
    location: Optional[str] = None
    handles: List[str] = []
    voice: str = "neutral"
    length: str = "medium"
    emojis: List[str] = []
    emojiPlacement: str = "end"
    hashtagsPlacement: str = "end"
    mentionsPlacement: str = "end"

class ComposeIn(BaseModel):
    text: str = Field("", description="Core description to compose around")
    prompt: Optional[str] = Field(None, description="If set, also report the quality-gate verdict for `text`")
    options: ComposeOptionsIn = Field(default_factory=ComposeOptionsIn)

class ComposeOut(BaseModel):
    enhanced: str
    looks_bad: Optional[bool] = None
    placements: Dict[str, PlacementName] = {}
