"""
Image-to-text captioner (ViT-GPT2 style VisionEncoderDecoder) + model container:
- EXIF-aware RGB conversion before captioning
- sampling knobs from settings (max_new_tokens / temperature / top_k / top_p)
- load guards: any load failure degrades to the stub captioner / no generator
- ModelClients is built once per app and passed around explicitly (no module globals)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from PIL import Image, ImageOps
import logging
import re
import threading

from ..core.settings import Settings
from ..services.text_gen import HFTextGenerator, OpenAIGenerator, TextGenConfig, resolve_device
from .captioner import Captioner, Generator, StubCaptioner

logger = logging.getLogger(__name__)

_HF_TOKEN_RE = re.compile(r"^hf_[A-Za-z0-9]+$")

def sanitize_hf_token(raw: Optional[str]) -> Optional[str]:
    """Only pass tokens that look like real HF tokens; junk values make hub calls fail."""
    raw = (raw or "").strip()
    return raw if _HF_TOKEN_RE.match(raw) else None

@dataclass
class CaptionerConfig:
    model_id: str
    device: str          # "auto" | "cpu" | "cuda"
    cache_dir: str
    max_new_tokens: int
    temperature: float
    top_k: int
    top_p: float
    token: Optional[str] = None

class HFCaptioner:
    def __init__(self, cfg: CaptionerConfig):
        from transformers import AutoImageProcessor, AutoTokenizer, VisionEncoderDecoderModel

        self.cfg = cfg
        self.model_id = cfg.model_id
        self.processor = AutoImageProcessor.from_pretrained(
            cfg.model_id, cache_dir=cfg.cache_dir, token=cfg.token
        )
        self.tokenizer = AutoTokenizer.from_pretrained(
            cfg.model_id, cache_dir=cfg.cache_dir, token=cfg.token
        )
        self.model = VisionEncoderDecoderModel.from_pretrained(
            cfg.model_id, cache_dir=cfg.cache_dir, token=cfg.token
        ).eval()
        self._device = resolve_device(cfg.device)
        self.model.to(self._device)

    def _apply_orientation(self, img: Image.Image) -> Image.Image:
        return ImageOps.exif_transpose(img).convert("RGB")

    def caption(self, img: Image.Image) -> str:
        import torch

        img = self._apply_orientation(img)
        pixel_values = self.processor(images=[img], return_tensors="pt").pixel_values.to(self._device)
        with torch.no_grad():
            gen = self.model.generate(
                pixel_values,
                max_new_tokens=self.cfg.max_new_tokens,
                do_sample=True,
                temperature=self.cfg.temperature,
                top_k=self.cfg.top_k,
                top_p=self.cfg.top_p,
            )
        out = self.tokenizer.batch_decode(gen, skip_special_tokens=True)
        return (out[0] if out else "").strip()

@dataclass
class ModelClients:
    """
    Lazily-loaded captioner + generator for one app instance.
    Tests (or callers with their own models) pass `captioner`/`generator` directly.
    """
    settings: Settings
    captioner: Optional[Captioner] = None
    generator: Optional[Generator] = None
    load_errors: Dict[str, str] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _gen_loaded: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        if self.generator is not None:
            self._gen_loaded = True

    def get_captioner(self) -> Captioner:
        with self._lock:
            if self.captioner is None:
                self.captioner = self._load_captioner()
            return self.captioner

    def get_generator(self) -> Optional[Generator]:
        with self._lock:
            if not self._gen_loaded:
                self.generator = self._load_generator()
                self._gen_loaded = True
            return self.generator

    def _load_captioner(self) -> Captioner:
        s = self.settings
        if not s.use_models:
            return StubCaptioner()
        cfg = CaptionerConfig(
            model_id=s.image_model_id,
            device=s.device,
            cache_dir=str(s.transformers_cache),
            max_new_tokens=s.caption_max_new_tokens,
            temperature=s.caption_temperature,
            top_k=s.caption_top_k,
            top_p=s.caption_top_p,
            token=sanitize_hf_token(s.hf_token),
        )
        try:
            return HFCaptioner(cfg)
        except Exception as e:
            logger.warning("image caption model %s failed to load, using stub: %r", cfg.model_id, e)
            self.load_errors["captioner"] = repr(e)
            return StubCaptioner(reason=repr(e))

    def _load_generator(self) -> Optional[Generator]:
        s = self.settings
        if not s.use_models:
            return None
        cfg = TextGenConfig(
            model_id=s.text_model_id,
            device=s.device,
            cache_dir=str(s.transformers_cache),
            token=sanitize_hf_token(s.hf_token),
        )
        try:
            return HFTextGenerator(cfg)
        except Exception as e:
            logger.warning("text model %s failed to load: %r", cfg.model_id, e)
            self.load_errors["generator"] = repr(e)
        if s.openai_api_key:
            try:
                return OpenAIGenerator(s.openai_api_key, model=s.openai_model)
            except Exception as e:
                logger.warning("openai fallback unavailable: %r", e)
                self.load_errors["openai"] = repr(e)
        return None

    def status(self) -> Dict[str, Any]:
        cap = self.captioner
        gen = self.generator
        return {
            "models_enabled": self.settings.use_models,
            "captioner": getattr(cap, "model_id", None) if cap is not None else "not-loaded",
            "using_stub_captioner": isinstance(cap, StubCaptioner),
            "generator": getattr(gen, "model_id", None) if self._gen_loaded else "not-loaded",
            "load_errors": dict(self.load_errors),
        }
