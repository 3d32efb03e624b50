"""
Configuration management for the moderation review service.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Settings
    app_name: str = "ModReview - Content Moderation Review"
    version: str = "1.0.0"
    api_prefix: str = "/v1"
    log_level: str = "INFO"

    # Storage Settings
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./modreview.db")
    data_dir: str = os.getenv("DATA_DIR", "./data/modreview")
    store_backend: str = "sql"  # "sql" or "json"

    # Hosted moderation functions (provider adapters)
    functions_base_url: str = os.getenv("FUNCTIONS_BASE_URL", "http://localhost:54321/functions/v1")
    functions_api_key: str = os.getenv("FUNCTIONS_API_KEY", "")
    enabled_providers: List[str] = ["openai", "azure", "google_video_intelligence"]

    # Timeouts
    provider_timeout_sec: float = 120.0
    analysis_timeout_sec: float = 300.0

    # Admission thresholds. Provisional values, confirm with policy owners.
    azure_severity_threshold: int = 2
    azure_max_severity: int = 6
    google_explicit_threshold: float = 0.75
    google_label_threshold: float = 0.7

    # Substring of a Google label -> canonical category
    google_label_signals: Dict[str, str] = {
        "violence": "violence",
        "weapon": "weapons",
        "blood": "graphic_content",
        "fight": "violence",
    }

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()


@dataclass
class NormalizerThresholds:
    """
    Admission thresholds used by the provider normalizers.

    Kept separate from Settings so the pure normalizers can be driven
    with explicit values in tests.
    """
    azure_severity: int = 2
    azure_max_severity: int = 6
    google_explicit: float = 0.75
    google_label: float = 0.7
    google_label_signals: Dict[str, str] = field(default_factory=lambda: {
        "violence": "violence",
        "weapon": "weapons",
        "blood": "graphic_content",
        "fight": "violence",
    })

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "NormalizerThresholds":
        """Build thresholds from application settings."""
        source = source or settings
        return cls(
            azure_severity=source.azure_severity_threshold,
            azure_max_severity=source.azure_max_severity,
            google_explicit=source.google_explicit_threshold,
            google_label=source.google_label_threshold,
            google_label_signals=dict(source.google_label_signals),
        )
