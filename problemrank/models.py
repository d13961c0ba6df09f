"""Pydantic models for domain objects."""

import datetime as dt
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReportItem(BaseModel):
    """A single problem report as fetched from the report store."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    text: str = ""  # Problem description
    category: Optional[str] = None
    date: Optional[Union[dt.date, dt.datetime]] = None
    department: Optional[str] = None
    assignee: Optional[str] = None
    reporter: Optional[str] = None
    status: Optional[str] = None
    title: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        # UUIDs and other opaque ids are stored by their string form
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("text", mode="before")
    @classmethod
    def _none_text_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("category", "department", "assignee", "reporter", "status", "title", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_tuple(cls, row: tuple) -> "ReportItem":
        """Build an item from an ``(id, text, category, date)`` tuple."""
        report_id, text, category, date = row
        return cls(id=report_id, text=text, category=category, date=date)


class ReportFilters(BaseModel):
    """Filter criteria applied by the report store."""

    department: Optional[str] = None
    category: Optional[str] = None
    assignee: Optional[str] = None
    reporter: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class RankedProblem(BaseModel):
    """A ranked problem cluster, as returned to the serving layer."""

    rank: int  # 1-based
    description: str  # Short key phrase
    frequency: int
    rpn_score: float
    category: Optional[str] = None
    sample_ids: list[str] = Field(default_factory=list)
    centroid_text: str = ""
    algorithm_info: str = ""


class ClusterStats(BaseModel):
    """Diagnostics about one clustering run."""

    total_items: int = 0
    vocabulary_size: int = 0
    cluster_count: int = 0
    top_terms: list[str] = Field(default_factory=list)
    threshold: float = 0.0
    weight_trigram: float = 0.0
    weight_lcs: float = 0.0
    weight_tfidf: float = 0.0


class WordFrequency(BaseModel):
    """Word and its occurrence count, for word cloud display."""

    word: str
    count: int


class SimilarityPair(BaseModel):
    """Similarity breakdown between two reports."""

    item1_id: str
    item1: str
    item2_id: str
    item2: str
    trigram_similarity: float
    lcs_similarity: float
    tfidf_similarity: float
    combined_similarity: float


class RankingDebugInfo(BaseModel):
    """Clustering stats plus pairwise similarity details."""

    stats: ClusterStats
    similarity_pairs: list[SimilarityPair] = Field(default_factory=list)
