import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docext.images import MAX_IMAGE_SIZE


class Settings(BaseSettings):
    max_image_size: int = Field(default=MAX_IMAGE_SIZE, gt=0)  # bytes per inlined image
    image_workers: int = Field(default=4, ge=1)  # threads reading images in parallel
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="DOCEXT_",
        env_file=[os.getenv("DOCEXT_ENV_FILE", ""), ".env"],
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings from the environment, read once per process."""
    return Settings()
