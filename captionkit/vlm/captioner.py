"""
Purpose:
- Small interfaces for image captioning and text generation.
- Stub captioner used when models are disabled or fail to load, so the API
  surface never changes.

Notes:
- We keep simple signatures: PIL image -> short caption, prompt -> text.
"""

from __future__ import annotations
from typing import Any, Optional, Protocol
from PIL import Image

class Captioner(Protocol):
    model_id: str

    def caption(self, img: Image.Image) -> str: ...

class Generator(Protocol):
    model_id: str

    def generate(self, prompt: str, **gen_kwargs: Any) -> str: ...

def caption_image_stub(img: Image.Image) -> str:
    """
    Very simple placeholder captioner.
    """
    w, h = img.size
    return f"A photo ({w}x{h})."

class StubCaptioner:
    model_id = "stub"

    def __init__(self, reason: Optional[str] = None):
        self._reason = reason  # why the real model is not in use (None = disabled by config)

    def caption(self, img: Image.Image) -> str:
        return caption_image_stub(img)
