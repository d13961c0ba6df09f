"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from problemrank.ranking.rpn import RPNConfig
from problemrank.similarity.hybrid import CENTROID_WEIGHTS, CLUSTERING_WEIGHTS, HybridWeights


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Data Directories
    data_dir: Path = Field(
        default=Path(".problemrank"),
        description="Root data directory",
    )
    db_path: Optional[Path] = Field(
        default=None,
        description="SQLite report store path",
    )

    # Clustering Parameters
    clustering_threshold: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Minimum hybrid similarity to the cluster founder",
    )
    clustering_weights: HybridWeights = Field(
        default=CLUSTERING_WEIGHTS,
        description="Trigram/LCS/TF-IDF weights used when grouping reports",
    )
    centroid_weights: HybridWeights = Field(
        default=CENTROID_WEIGHTS,
        description="Trigram/LCS/TF-IDF weights used when picking a centroid",
    )

    # RPN Parameters
    frequency_weight: float = Field(
        default=0.6,
        ge=0.0,
        description="Weight of the log-scaled frequency score",
    )
    recency_weight: float = Field(
        default=0.4,
        ge=0.0,
        description="Weight of the recency decay score",
    )
    recency_window_days: float = Field(
        default=90,
        gt=0,
        description="Decay window for recency scoring, in days",
    )

    # Output Parameters
    top_problems_limit: int = Field(
        default=10,
        gt=0,
        description="Number of ranked problems to return",
    )
    key_phrase_words: int = Field(
        default=4,
        gt=0,
        description="Maximum words in a cluster key phrase",
    )
    sample_id_limit: int = Field(
        default=5,
        gt=0,
        description="Maximum sample ids per ranked problem",
    )
    word_cloud_limit: int = Field(
        default=30,
        gt=0,
        description="Number of words returned for the word cloud",
    )
    top_terms_limit: int = Field(
        default=10,
        gt=0,
        description="Number of top IDF terms reported in cluster stats",
    )
    debug_pair_limit: int = Field(
        default=10,
        gt=1,
        description="Number of leading reports compared pairwise in debug output",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Log file path",
    )
    log_json: bool = Field(
        default=False,
        description="Write the log file as JSON lines",
    )

    def __init__(self, **kwargs):
        """Initialize config and set dependent paths."""
        super().__init__(**kwargs)

        if self.db_path is None:
            self.db_path = self.data_dir / "reports.db"
        if self.log_file is None:
            self.log_file = self.data_dir / "problemrank.log"

    def rpn_config(self) -> RPNConfig:
        """Build the RPN scorer configuration."""
        return RPNConfig(
            frequency_weight=self.frequency_weight,
            recency_weight=self.recency_weight,
            recency_days=self.recency_window_days,
        )

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if self.db_path:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        _config = Config()
        _config.ensure_directories()
    return _config


def set_config(config: Config) -> None:
    """Replace the global config instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset global config (mainly for testing)."""
    global _config
    _config = None
