"""
Purpose:
- Sanity-check critical library versions after upgrades.
- Import the exact modules we use and print versions so we can spot drift immediately.
- Optionally (--load) pull both models once to warm the transformers cache.
"""

import sys
import fastapi
import uvicorn
import PIL
import transformers
import torch
from pydantic_settings import BaseSettings

print("python", sys.version)
print("fastapi", fastapi.__version__)
print("uvicorn", uvicorn.__version__)
print("pillow", PIL.__version__)
print("transformers", transformers.__version__)
print("torch", torch.__version__, "cuda" if torch.cuda.is_available() else "cpu-only")
print("pydantic-settings", BaseSettings.__module__.split(".")[0])  # presence check

if "--load" in sys.argv:
    from captionkit.core.settings import settings
    from captionkit.vlm.hf_captioner import ModelClients

    models = ModelClients(settings=settings)
    print("captioner", models.get_captioner().model_id)
    gen = models.get_generator()
    print("generator", getattr(gen, "model_id", None))
    print("load_errors", models.load_errors)
print("OK")
