"""Recurring problem ranking with hybrid text similarity clustering."""

__version__ = "0.1.0"

from .config import Config, get_config, reset_config, set_config
from .models import (
    ClusterStats,
    RankedProblem,
    RankingDebugInfo,
    ReportFilters,
    ReportItem,
    SimilarityPair,
    WordFrequency,
)
from .ranking.service import RankingService, debug_similarity, rank_top_problems, word_cloud

__all__ = [
    "Config",
    "get_config",
    "reset_config",
    "set_config",
    "ClusterStats",
    "RankedProblem",
    "RankingDebugInfo",
    "ReportFilters",
    "ReportItem",
    "SimilarityPair",
    "WordFrequency",
    "RankingService",
    "debug_similarity",
    "rank_top_problems",
    "word_cloud",
]
