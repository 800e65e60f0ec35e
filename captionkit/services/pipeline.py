"""
Purpose:
- Orchestrate one caption request:
  1) image -> base caption (image model)
  2) base caption -> paraphrase (text model, tone/voice/length-aware prompt)
  3) quality gate: keep the paraphrase or fall back to the base caption
  4) optional emoji suggestions -> emoji extractor
  5) rule-based composer for hashtags / mentions / location / emojis / voice / length

Design:
- Model calls are blocking (torch), so they run in worker threads; these are the
  only await points.
- Generator failures never surface to the caller: they are logged and treated
  exactly like a quality-gate rejection (meta.source = "rule-based").
"""

from __future__ import annotations
import asyncio
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from PIL import Image

from ..core.settings import Settings
from ..vlm.hf_captioner import ModelClients
from .composer import CaptionOptions, rule_based_caption
from .emoji import extract_emojis_only
from .quality import looks_bad

logger = logging.getLogger(__name__)

SOURCE_MODEL = "model"
SOURCE_RULE_BASED = "rule-based"

_WS = re.compile(r"\s+")
_TRAILING_DOTS = re.compile(r"\.(\s*\.)+$")
_EDGE_QUOTES = re.compile(r'^"+|"+$')
_HASHTAG_WORD = re.compile(r"(^|\s)#\w+")

def clean_base_caption(raw: str) -> str:
    """'a dog  on a beach . .' -> 'a dog on a beach .'"""
    text = _WS.sub(" ", (raw or "").strip())
    return _TRAILING_DOTS.sub(".", text).strip()

def clean_generated(raw: str) -> str:
    """Strip wrapping quotes and any hashtags the model slipped in."""
    text = _EDGE_QUOTES.sub("", (raw or "").strip())
    text = _WS.sub(" ", text).strip()
    text = _HASHTAG_WORD.sub("", text)
    return _WS.sub(" ", text).strip()

def build_paraphrase_prompt(base_caption: str, opts: CaptionOptions) -> str:
    keywords_line = (
        f"Incorporate these concepts naturally: {', '.join(opts.keywords)}. " if opts.keywords else ""
    )
    loc_line = (
        "If relevant, acknowledge the location naturally (do not add hashtags). " if opts.location else ""
    )
    return (
        f'Paraphrase into a {opts.tone} social media caption in the voice of "{opts.voice.value}". '
        f"Keep it {opts.length.value}. Do NOT include hashtags. "
        f"{keywords_line}{loc_line}"
        f"Description: {base_caption}"
    )

def build_emoji_prompt(core: str, count: int) -> str:
    return (
        f'Given this caption: "{core}". Suggest {count} relevant emojis only. '
        "Return emojis separated by spaces, with no words or punctuation."
    )

@dataclass
class CaptionResult:
    caption: str
    enhanced: str
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"caption": self.caption, "enhanced": self.enhanced, "meta": self.meta}

class CaptionPipeline:
    def __init__(self, models: ModelClients, settings: Settings):
        self.models = models
        self.settings = settings

    async def _generate(self, prompt: str, **gen_kwargs: Any) -> str:
        gen = await asyncio.to_thread(self.models.get_generator)
        if gen is None:
            raise RuntimeError("no text generator available")
        return await asyncio.to_thread(gen.generate, prompt, **gen_kwargs)

    async def base_caption(self, image: Image.Image) -> str:
        cap = await asyncio.to_thread(self.models.get_captioner)
        raw = await asyncio.to_thread(cap.caption, image)
        return clean_base_caption(raw)

    async def paraphrase(self, base: str, opts: CaptionOptions) -> tuple[str, str, str]:
        """Returns (core text, source, prompt)."""
        s = self.settings
        prompt = build_paraphrase_prompt(base, opts)
        try:
            raw = await self._generate(
                prompt,
                max_new_tokens=s.paraphrase_max_new_tokens,
                temperature=s.paraphrase_temperature,
                top_p=s.paraphrase_top_p,
                repetition_penalty=s.paraphrase_repetition_penalty,
            )
        except Exception as e:
            logger.warning("paraphrase generation failed, using base caption: %r", e)
            return base, SOURCE_RULE_BASED, prompt
        candidate = clean_generated(raw)
        if looks_bad(candidate, prompt):
            logger.info("paraphrase rejected by quality gate: %r", candidate)
            return base, SOURCE_RULE_BASED, prompt
        return candidate, SOURCE_MODEL, prompt

    async def suggest_emojis(self, core: str, count: int) -> List[str]:
        s = self.settings
        try:
            raw = await self._generate(
                build_emoji_prompt(core, count),
                max_new_tokens=s.emoji_max_new_tokens,
                temperature=s.emoji_temperature,
                top_p=s.emoji_top_p,
            )
        except Exception as e:
            logger.warning("emoji suggestion failed: %r", e)
            return []
        return extract_emojis_only(raw, count)

    async def run(self, image: Image.Image, opts: CaptionOptions, emoji_count: int = 2) -> CaptionResult:
        base = await self.base_caption(image)
        logger.debug("base caption: %r", base)

        core, source, prompt = await self.paraphrase(base, opts)

        emojis: List[str] = []
        if opts.include_emojis:
            emojis = await self.suggest_emojis(core, emoji_count)
        opts = replace(opts, emojis=emojis)

        final = rule_based_caption(core, opts)
        logger.info("caption composed (source=%s, emojis=%s): %s", source, emojis, final)

        gen = self.models.generator
        cap = self.models.captioner
        return CaptionResult(
            caption=base,
            enhanced=final,
            meta={
                "image_caption_model": getattr(cap, "model_id", None) or self.settings.image_model_id,
                "text_gen_model": getattr(gen, "model_id", None) or self.settings.text_model_id,
                "prompt": prompt,
                "source": source,
                "used_keywords": list(opts.keywords),
                "used_hashtags": list(opts.hashtags) if opts.include_hashtags else [],
                "used_emojis": list(emojis) if opts.include_emojis else [],
                "placements": opts.placements(),
            },
        )
