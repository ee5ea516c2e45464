"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Geocoding (Nominatim-compatible place search)
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "Sightline/1.0"  # Nominatim rejects anonymous clients
    geocode_timeout: float = 20.0
    geocode_max_attempts: int = 2
    geocode_retry_backoff: float = 1.0  # seconds, multiplied by attempt number
    bbox_expand_factor: float = 1.1

    # OpenAI translation (passthrough when no key is set)
    openai_api_key: Optional[str] = None
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    translation_model: str = "gpt-4o-mini"
    translation_batch_size: int = 50
    translation_timeout: float = 30.0

    # FastAPI Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True

    # CORS Configuration
    frontend_url: str = "http://localhost:3000"

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
