import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    resource_path: Optional[Path] = Field(
        None, description="Flashcard XML document to load. The bundled resource is used when unset"
    )
    reshuffle_interval_seconds: float = Field(15.0, description="Seconds between two deck reshuffles")
    flip_duration_ms: int = Field(500, description="Duration of a single card flip animation in milliseconds")
    face_threshold_degrees: float = Field(90.0, description="Rotation at which a card shows its answer")
    frame_rate: int = Field(60, description="Frames per second used when streaming flip animation frames")
    strip_whitespace: bool = Field(False, description="Strip surrounding whitespace from question and answer text")
    reset_flips_on_reshuffle: bool = Field(False, description="Turn every card back to its question on reshuffle")
    shuffle_seed: Optional[int] = Field(None, description="Seed for the reshuffle random generator")
    log_level: str = Field("INFO", description="Root logging level")
    log_json: bool = Field(True, description="Emit log records as JSON lines")

    model_config = SettingsConfigDict(env_prefix="FLASHDECK_", env_file=".env", env_file_encoding="utf-8")

    @field_validator('reshuffle_interval_seconds', 'flip_duration_ms', 'frame_rate')
    def validate_positive(cls, v):
        """
        Validate that timing values are strictly positive.
        """
        if v <= 0:
            raise ValueError("The value must be greater than zero.")
        return v

    @field_validator('face_threshold_degrees')
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 < v < 180.0:
            raise ValueError("The face threshold must lie strictly between 0 and 180 degrees.")
        return v

    @field_validator('log_level')
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


# Create a settings instance
settings = Settings()

# Export settings instance
__all__ = ['Settings', 'settings']
