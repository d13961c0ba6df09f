"""Similarity signals used by the clustering engine."""

from .hybrid import CENTROID_WEIGHTS, CLUSTERING_WEIGHTS, HybridWeights, combined_score
from .lcs import lcs_similarity, longest_common_substring
from .tfidf import TfidfVector, TfidfVectorizer, cosine_similarity
from .trigram import generate_trigrams, trigram_similarity

__all__ = [
    "CENTROID_WEIGHTS",
    "CLUSTERING_WEIGHTS",
    "HybridWeights",
    "combined_score",
    "lcs_similarity",
    "longest_common_substring",
    "TfidfVector",
    "TfidfVectorizer",
    "cosine_similarity",
    "generate_trigrams",
    "trigram_similarity",
]
