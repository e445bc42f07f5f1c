"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
This ensures consistent configuration across the engine and its scripts.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Engine settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    ENVIRONMENT: str = Field(default="development")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")  # json or text

    # Rule tables and template library
    # Directory holding plan_rules.yaml / workout_library.yaml.
    # When unset, the copies shipped inside the package are used.
    PLAN_CONFIG_DIR: Optional[str] = Field(default=None)

    # Window expansion
    DEFAULT_WINDOW_WEEKS: int = Field(default=3)
    # Seed for template selection; None means a fresh random source per process.
    TEMPLATE_SELECTION_SEED: Optional[int] = Field(default=None)

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    @field_validator("DEFAULT_WINDOW_WEEKS")
    @classmethod
    def validate_window_weeks(cls, v: int) -> int:
        if v not in (2, 3):
            raise ValueError("DEFAULT_WINDOW_WEEKS must be 2 or 3")
        return v


settings = Settings()
