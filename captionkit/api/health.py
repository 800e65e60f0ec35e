# Common language: Environment/ops probe that surfaces version pins, config, and model status.
# Use this before/after upgrades to confirm no silent drift.

from fastapi import APIRouter, Request
import sys, importlib

router = APIRouter(tags=["health"])

def _ver(modname: str) -> str:
    try:
        m = importlib.import_module(modname)
        return getattr(m, "__version__", "unknown")
    except Exception:
        return "not-installed"

@router.get("/healthz")
def healthz(request: Request):
    pipeline = request.app.state.pipeline
    settings = pipeline.settings
    return {
        "status": "ok",
        "python": sys.version.split()[0],
        "versions": {
            "fastapi": _ver("fastapi"),
            "uvicorn": _ver("uvicorn"),
            "pydantic_settings": _ver("pydantic_settings"),
            "PIL": _ver("PIL"),
            "transformers": _ver("transformers"),
            "torch": _ver("torch"),
            "openai": _ver("openai"),
        },
        "config": {
            "image_model": settings.image_model_id,
            "text_model": settings.text_model_id,
            "device": settings.device,
            "transformers_cache": str(settings.transformers_cache),
            "env_keys_present": {
                "HF_TOKEN": bool(settings.hf_token),
                "OPENAI_API_KEY": bool(settings.openai_api_key),
            },
        },
        "models": pipeline.models.status(),
    }
