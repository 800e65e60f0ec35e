"""
Purpose:
- Centralized configuration using pydantic-settings.
- Reads from environment variables and optional .env file.
- Keeps model ids, generation knobs and host/port tunable without code changes.
"""

from typing import List, Optional
from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Pydantic v2 config (env file + ignore unexpected env vars)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",          # <-- prevents crashes if extra env vars exist
    )

    # API host/port
    host: str = Field(default="0.0.0.0", description="Bind address for FastAPI/Uvicorn")
    port: int = Field(default=5000, description="Port for FastAPI/Uvicorn")

    # CORS
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed origins for browser apps"
    )

    log_level: str = Field(default="INFO", description="Root log level (DEBUG/INFO/WARNING/ERROR)")

    # Uploads
    max_upload_mb: float = Field(default=10.0, description="Reject images larger than this")

    # ---- Model ids ----
    # toggle: if false, we keep using the stub captioner and skip the text generator
    use_models: bool = Field(default=True)
    image_model_id: str = Field(default="nlpconnect/vit-gpt2-image-captioning", description="image -> text")
    text_model_id: str = Field(default="MBZUAI/LaMini-Flan-T5-248M", description="text -> text paraphrase")
    hf_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("hf_token", "hugging_face_hub_token"),
        description="HF token; ignored unless it looks like hf_xxx",
    )
    transformers_cache: Path = Field(default=Path("./.transformers-cache"))
    device: str = Field(default="auto")       # "auto" | "cuda" | "cpu"

    # ---- Image caption knobs ----
    caption_max_new_tokens: int = Field(default=35)
    caption_temperature: float = Field(default=0.7)
    caption_top_k: int = Field(default=50)
    caption_top_p: float = Field(default=0.95)

    # ---- Paraphrase knobs ----
    paraphrase_max_new_tokens: int = Field(default=64)
    paraphrase_temperature: float = Field(default=0.8)
    paraphrase_top_p: float = Field(default=0.95)
    paraphrase_repetition_penalty: float = Field(default=1.05)

    # ---- Emoji suggestion knobs ----
    emoji_max_new_tokens: int = Field(default=16)
    emoji_temperature: float = Field(default=0.7)
    emoji_top_p: float = Field(default=0.95)

    # Optional OpenAI fallback for text generation (only used if the local model fails to load)
    openai_api_key: Optional[str] = None
    openai_model: str = Field(default="gpt-4o-mini")

settings = Settings()
