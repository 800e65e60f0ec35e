from __future__ import annotations

from io import BytesIO
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from PIL import Image

from captionkit.core.settings import Settings
from captionkit.vlm.hf_captioner import ModelClients


class FakeCaptioner:
    model_id = "IMG-1"

    def __init__(self, text: str = "A warm sunset over the beach. .", exc: Exception | None = None):
        self.text = text
        self.exc = exc
        self.calls = 0

    def caption(self, img):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return self.text


class FakeGenerator:
    """Answers by prompt prefix, like the real prompts the pipeline sends."""

    model_id = "TXT-1"

    def __init__(self, paraphrase="Chill vibes at the beach", emojis="🏖️ 🌅", exc: Exception | None = None):
        self.paraphrase = paraphrase
        self.emojis = emojis
        self.exc = exc
        self.prompts: list[str] = []
        self.kwargs: list[dict] = []

    def generate(self, prompt, **gen_kwargs):
        self.prompts.append(prompt)
        self.kwargs.append(gen_kwargs)
        if self.exc is not None:
            raise self.exc
        if prompt.startswith("Paraphrase into"):
            return self.paraphrase
        if prompt.startswith("Given this caption:"):
            return self.emojis
        return "default"


@pytest.fixture()
def settings() -> Settings:
    return Settings(use_models=False, log_level="WARNING", openai_api_key=None, hf_token=None)


@pytest.fixture()
def captioner() -> FakeCaptioner:
    return FakeCaptioner()


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def models(settings, captioner, generator) -> ModelClients:
    return ModelClients(settings=settings, captioner=captioner, generator=generator)


@pytest.fixture()
def png_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGB", (8, 8), (200, 120, 40)).save(buf, format="PNG")
    return buf.getvalue()
