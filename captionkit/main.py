"""
Purpose:
- FastAPI application factory and router mounts.
- Adds CORS for the browser client + request logging.
- Uvicorn will serve this on settings.host:settings.port.
"""

from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from .core.settings import Settings, settings as default_settings
from .core.logging_setup import configure_logging
from .services.pipeline import CaptionPipeline
from .vlm.hf_captioner import ModelClients
from .api.health import router as health_router
from .api.caption import router as caption_router

logger = logging.getLogger(__name__)

def create_app(settings: Optional[Settings] = None, models: Optional[ModelClients] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="Caption API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("[REQ] %s %s", request.method, request.url.path)
        return await call_next(request)

    # models load lazily on first use
    models = models or ModelClients(settings=settings)
    app.state.pipeline = CaptionPipeline(models, settings)

    app.include_router(health_router)
    app.include_router(caption_router)
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("captionkit.main:app", host=default_settings.host, port=default_settings.port)
