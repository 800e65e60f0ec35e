"""
Purpose:
- Text -> text generation for the paraphrase and emoji-suggestion prompts.
- Local seq2seq model via transformers (LaMini-Flan-T5 by default).
- Optional fallback: OpenAI API if OPENAI_API_KEY is set in env/.env.

Design:
- Both generators expose `generate(prompt, **gen_kwargs) -> str` and a `model_id`.
- Errors propagate; the pipeline decides whether to fall back to the base caption.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)

@dataclass
class TextGenConfig:
    model_id: str
    device: str                 # "auto" | "cpu" | "cuda"
    cache_dir: str
    token: Optional[str] = None

def resolve_device(device: str) -> str:
    import torch
    if device == "cpu" or not torch.cuda.is_available():
        return "cpu"
    return "cuda"

class HFTextGenerator:
    def __init__(self, cfg: TextGenConfig):
        """
        Load tokenizer + seq2seq model once; generation reuses them.
        """
        from transformers import AutoTokenizer, AutoModelForSeq2SeqLM

        self.cfg = cfg
        self.model_id = cfg.model_id
        self.tokenizer = AutoTokenizer.from_pretrained(
            cfg.model_id, cache_dir=cfg.cache_dir, token=cfg.token
        )
        self.model = AutoModelForSeq2SeqLM.from_pretrained(
            cfg.model_id, cache_dir=cfg.cache_dir, token=cfg.token
        ).eval()
        self._device = resolve_device(cfg.device)
        self.model.to(self._device)

    def generate(self, prompt: str, **gen_kwargs: Any) -> str:
        import torch

        inputs = self.tokenizer(prompt, return_tensors="pt", truncation=True).to(self._device)
        # sampling params (temperature/top_p) only apply when sampling is on
        gen_kwargs.setdefault("do_sample", "temperature" in gen_kwargs or "top_p" in gen_kwargs)
        with torch.no_grad():
            out = self.model.generate(**inputs, **gen_kwargs)
        return self.tokenizer.decode(out[0], skip_special_tokens=True).strip()

class OpenAIGenerator:
    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        # lightweight runtime import to avoid hard dependency if unused
        from openai import OpenAI

        self.client = OpenAI(api_key=api_key)
        self.model_id = model

    def generate(self, prompt: str, **gen_kwargs: Any) -> str:
        resp = self.client.chat.completions.create(
            model=self.model_id,
            messages=[
                {"role": "system", "content": "You write short, natural social media captions."},
                {"role": "user", "content": prompt},
            ],
            max_tokens=int(gen_kwargs.get("max_new_tokens", 64)),
            temperature=float(gen_kwargs.get("temperature", 0.7)),
            top_p=float(gen_kwargs.get("top_p", 1.0)),
        )
        return (resp.choices[0].message.content or "").strip()
