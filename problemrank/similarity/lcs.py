"""Longest common substring similarity."""

import numpy as np

from problemrank.text.normalizer import normalize


def _code_points(text: str) -> np.ndarray:
    return np.fromiter((ord(char) for char in text), dtype=np.int64, count=len(text))


def longest_common_substring(s1: str, s2: str) -> tuple[str, int]:
    """Find the longest contiguous substring shared by two texts.

    Classic dynamic-programming table, filled one row of ``s1`` at a time.
    Only a strictly longer match replaces the current best, so the first
    maximal match in scan order wins.

    Args:
        s1: First text
        s2: Second text

    Returns:
        Tuple of (substring taken from the normalized ``s1``, its length)
    """
    r1 = normalize(s1)
    r2 = normalize(s2)

    if not r1 or not r2:
        return "", 0

    codes2 = _code_points(r2)
    previous = np.zeros(len(r2) + 1, dtype=np.int64)

    max_len = 0
    end_idx = 0

    for i, char in enumerate(r1, start=1):
        current = np.zeros_like(previous)
        matches = codes2 == ord(char)
        current[1:] = np.where(matches, previous[:-1] + 1, 0)

        row_max = int(current.max())
        if row_max > max_len:
            max_len = row_max
            end_idx = i

        previous = current

    if max_len == 0:
        return "", 0

    return r1[end_idx - max_len:end_idx], max_len


def lcs_similarity(s1: str, s2: str) -> float:
    """Compute similarity as LCS length over the longer text length.

    Args:
        s1: First text
        s2: Second text

    Returns:
        Similarity score (0.0-1.0); 1.0 when both texts are empty
    """
    n1 = normalize(s1)
    n2 = normalize(s2)

    if not n1 and not n2:
        return 1.0
    if not n1 or not n2:
        return 0.0

    _, lcs_len = longest_common_substring(n1, n2)

    return lcs_len / max(len(n1), len(n2))
