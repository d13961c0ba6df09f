"""Character trigram fingerprints and Jaccard similarity."""

from typing import AbstractSet

from problemrank.text.normalizer import normalize

TRIGRAM_SIZE = 3


def generate_trigrams(text: str) -> frozenset[str]:
    """Build the set of overlapping 3-character sequences of a text.

    Texts shorter than three characters yield a single-element set holding
    the whole normalized string. Empty text yields an empty set.

    Args:
        text: Report text

    Returns:
        Set of trigrams
    """
    normalized = normalize(text)

    if not normalized:
        return frozenset()

    if len(normalized) < TRIGRAM_SIZE:
        return frozenset({normalized})

    return frozenset(
        normalized[i:i + TRIGRAM_SIZE]
        for i in range(len(normalized) - TRIGRAM_SIZE + 1)
    )


def trigram_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Compute Jaccard similarity between two trigram sets.

    Args:
        a: First trigram set
        b: Second trigram set

    Returns:
        Similarity score (0.0-1.0); 1.0 when both sets are empty
    """
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0

    intersection = len(a & b)
    union = len(a) + len(b) - intersection

    return intersection / union if union else 0.0
