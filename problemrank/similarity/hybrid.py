"""Hybrid similarity: weighted blend of trigram, LCS and TF-IDF signals."""

from typing import AbstractSet

from pydantic import BaseModel, Field, model_validator

from problemrank.similarity.lcs import lcs_similarity
from problemrank.similarity.tfidf import TfidfVector, cosine_similarity
from problemrank.similarity.trigram import trigram_similarity

WEIGHT_TOLERANCE = 1e-6


class HybridWeights(BaseModel):
    """Weight profile applied to the three similarity signals."""

    model_config = {"frozen": True}

    trigram: float = Field(ge=0.0, le=1.0, description="Weight of trigram Jaccard similarity")
    lcs: float = Field(ge=0.0, le=1.0, description="Weight of longest-common-substring ratio")
    tfidf: float = Field(ge=0.0, le=1.0, description="Weight of TF-IDF cosine similarity")

    @model_validator(mode="after")
    def check_sum(self) -> "HybridWeights":
        total = self.trigram + self.lcs + self.tfidf
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"Hybrid weights must sum to 1.0, got {total:.4f}")
        return self


# Broad lexical/semantic overlap, merges paraphrased reports
CLUSTERING_WEIGHTS = HybridWeights(trigram=0.25, lcs=0.15, tfidf=0.60)

# Closer textual match, used to pick the most typical member
CENTROID_WEIGHTS = HybridWeights(trigram=0.30, lcs=0.20, tfidf=0.50)


def combined_score(
    weights: HybridWeights,
    trigram_sim: float,
    lcs_sim: float,
    tfidf_sim: float,
) -> float:
    """Weighted sum of the three similarity signals.

    Args:
        weights: Weight profile
        trigram_sim: Trigram Jaccard similarity
        lcs_sim: LCS ratio
        tfidf_sim: TF-IDF cosine similarity

    Returns:
        Combined similarity (0.0-1.0)
    """
    return (
        trigram_sim * weights.trigram
        + lcs_sim * weights.lcs
        + tfidf_sim * weights.tfidf
    )


class SimilarityBreakdown(BaseModel):
    """Individual similarity signals between two reports."""

    trigram: float
    lcs: float
    tfidf: float

    def combined(self, weights: HybridWeights) -> float:
        return combined_score(weights, self.trigram, self.lcs, self.tfidf)


def compare(
    text_a: str,
    trigrams_a: AbstractSet[str],
    vector_a: TfidfVector,
    text_b: str,
    trigrams_b: AbstractSet[str],
    vector_b: TfidfVector,
) -> SimilarityBreakdown:
    """Compute all three signals for a pair of precomputed reports."""
    return SimilarityBreakdown(
        trigram=trigram_similarity(trigrams_a, trigrams_b),
        lcs=lcs_similarity(text_a, text_b),
        tfidf=cosine_similarity(vector_a, vector_b),
    )
