"""
Configuration settings for joyo-drill.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are read with the JOYO_ prefix (e.g. JOYO_HOLD_MS=1200).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from joyo.gesture.classifier import PoseThresholds


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JOYO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".joyo",
        description="Directory holding the persisted progress blob",
    )
    progress_key: str = Field(
        default="kanji_mastery_progress",
        description="Key of the progress blob in the key-value store",
    )
    catalog_path: Path | None = Field(
        default=None,
        description="Card catalog JSON file (None uses the bundled Joyo list)",
    )

    # ========================================
    # Study Session
    # ========================================
    batch_size: int = Field(
        default=10,
        ge=1,
        description="Cards per New session",
    )
    option_count: int = Field(
        default=4,
        ge=2,
        description="Answer options shown per card (target + distractors)",
    )
    auto_flip_delay_ms: int = Field(
        default=600,
        ge=0,
        description="Delay between answering and revealing the card details",
    )

    # ========================================
    # Gesture Control
    # ========================================
    hold_ms: int = Field(
        default=1000,
        gt=0,
        description="How long a pose must be held before it fires",
    )
    cross_arms_distance: float = Field(
        default=0.15,
        gt=0.0,
        description="Max wrist-to-wrist distance (normalized) for Cross_Arms",
    )
    side_extension_margin: float = Field(
        default=0.05,
        ge=0.0,
        description="How far past the shoulder a wrist must reach for *_Side",
    )
    side_hip_margin: float = Field(
        default=0.10,
        ge=0.0,
        description="Allowance below the hip line still counted as a side pose",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @property
    def progress_file(self) -> Path:
        """Where the JSON file store keeps the progress blob."""
        return self.data_dir / f"{self.progress_key}.json"

    def get_pose_thresholds(self) -> PoseThresholds:
        """Get pose classifier thresholds."""
        return PoseThresholds(
            cross_arms_distance=self.cross_arms_distance,
            side_extension_margin=self.side_extension_margin,
            side_hip_margin=self.side_hip_margin,
        )

    def get_session_config(self) -> dict[str, int]:
        """Get study session configuration as a dictionary."""
        return {
            "batch_size": self.batch_size,
            "option_count": self.option_count,
            "auto_flip_delay_ms": self.auto_flip_delay_ms,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
