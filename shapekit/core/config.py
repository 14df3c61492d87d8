from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHAPEKIT_", env_file=".env", extra="ignore")

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console

    # Example generation
    GENERATOR_MAX_RETRIES: int = Field(100, ge=1)       # refinement filter attempts per sample
    GENERATOR_MAX_DEPTH: int = Field(4, ge=0)           # Lazy nesting before recursion is cut off
    GENERATOR_MAX_REST_LENGTH: int = Field(5, ge=0)     # longest run of rest elements
    GENERATOR_MAX_STRING_LENGTH: int = Field(10, ge=0)


@lru_cache
def get_settings() -> Settings:
    return Settings()
