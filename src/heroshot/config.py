from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Keys. The Gemini key only pre-seeds the session; it can be replaced from the entry screen.
    gemini_api_key: str | None = None
    openai_api_key: str | None = None

    # Models
    gemini_image_model: str = "gemini-3-pro-image-preview"
    gemini_text_model: str = "gemini-2.5-flash"
    openai_text_model: str = "gpt-4.1-mini"

    # "gemini" or "openai": backend for magic edit interpretation and title polish.
    text_provider: str = "gemini"

    # Rendering. Base sizes are on-screen canvas pixels; export multiplies by export_scale.
    canvas_sizes: dict[str, tuple[int, int]] = {
        "3:4": (540, 720),
        "1:1": (600, 600),
        "2.35:1": (940, 400),
        "9:16": (450, 800),
        "4:3": (720, 540),
    }
    export_scale: int = 2
    font_path: str | None = None
    bold_font_path: str | None = None

    log_level: str = "INFO"


settings = Settings()
