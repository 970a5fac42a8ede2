"""Application settings"""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Environment-based settings"""

    # API Keys (GEMINI_API_KEY, or API_KEY as used by the hosted deployment)
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "api_key"),
    )

    # Application
    app_name: str = "Room Makeover API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Image payload
    max_upload_size_mb: int = 10

    # Gemini API
    plan_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image-preview"
    palette_model: str = "gemini-2.5-flash"
    plan_temperature: float = 0.7  # consistent plans
    palette_temperature: float = 0.8  # more variety between palettes
    strict_plan_validation: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
