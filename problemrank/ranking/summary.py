"""Key phrase extraction and word frequency counting."""

from collections import Counter
from typing import Iterable, List, Sequence

from problemrank.models import WordFrequency
from problemrank.text.normalizer import extract_keywords

# Domain vocabulary prioritized in key phrases
IMPORTANT_WORDS = {
    # Problem types
    "rusak": 10, "pecah": 10, "retak": 10, "bocor": 10, "patah": 10,
    "bengkok": 10, "kotor": 10, "cacat": 10, "gagal": 10, "error": 10,
    "salah": 10, "keliru": 10, "tidak": 8, "kurang": 8, "lebih": 6,
    "beda": 8, "berbeda": 8, "miring": 10, "geser": 10, "longgar": 10,
    # Materials
    "material": 9, "bahan": 9, "kaca": 9, "aluminium": 9, "kayu": 9,
    "plat": 9, "besi": 9, "stainless": 9, "karet": 9, "plastik": 9,
    "cat": 9, "finishing": 9, "powder": 9, "coating": 9, "sealant": 9,
    # Components
    "pintu": 8, "jendela": 8, "frame": 8, "panel": 8, "handle": 8,
    "kunci": 8, "engsel": 8, "rel": 8, "roller": 8, "glass": 8,
    "profil": 8, "aksesoris": 8, "bracket": 8, "corner": 8, "gasket": 8,
    # Quality issues
    "dimensi": 9, "ukuran": 9, "warna": 9, "bentuk": 9, "kualitas": 9,
    "spec": 9, "spesifikasi": 9, "tolerance": 9, "standar": 9, "reject": 10,
    "defect": 10, "scratch": 10, "dent": 10, "baret": 10, "penyok": 10,
    # Process
    "welding": 8, "las": 8, "cutting": 8, "potong": 8, "drilling": 8,
    "bor": 8, "assembly": 8, "rakit": 8, "packing": 8, "kirim": 8,
    "produksi": 8, "proses": 7, "mesin": 8, "alat": 7, "setting": 8,
}

LONG_WORD_LENGTH = 5


def word_importance(word: str) -> int:
    """Importance weight of a word inside a cluster summary."""
    if word in IMPORTANT_WORDS:
        return IMPORTANT_WORDS[word]
    return 3 if len(word) > LONG_WORD_LENGTH else 1


def extract_key_phrase(text: str, max_words: int = 5) -> str:
    """Extract the most important words of a single text.

    Args:
        text: Problem description
        max_words: Maximum number of words (defaults to 5 when not positive)

    Returns:
        Space-joined key phrase, empty when the text has no keywords
    """
    if max_words <= 0:
        max_words = 5

    keywords = extract_keywords(text)
    if not keywords:
        return ""

    def score(word: str) -> int:
        if word in IMPORTANT_WORDS:
            return IMPORTANT_WORDS[word]
        if len(word) > LONG_WORD_LENGTH:
            return 3
        if len(word) > 3:
            return 2
        return 1

    # dict.fromkeys drops repeats and keeps first-occurrence order
    ranked = sorted(dict.fromkeys(keywords), key=score, reverse=True)

    return " ".join(ranked[:max_words])


def get_cluster_summary(descriptions: Sequence[str], max_words: int = 4) -> str:
    """Summarize a cluster in a few words.

    Each keyword counts once per description; its score is that count
    times its importance weight.

    Args:
        descriptions: Member descriptions
        max_words: Maximum number of words

    Returns:
        Space-joined summary
    """
    if not descriptions:
        return ""

    word_counts: Counter = Counter()
    for desc in descriptions:
        # Each description counts a word once
        for word in dict.fromkeys(extract_keywords(desc)):
            word_counts[word] += 1

    ranked = sorted(
        word_counts.items(),
        key=lambda item: item[1] * word_importance(item[0]),
        reverse=True,
    )
    words = [word for word, _ in ranked[:max_words]]

    if not words:
        return extract_key_phrase(descriptions[0], max_words)

    return " ".join(words)


def count_word_frequencies(texts: Iterable[str], limit: int = 30) -> List[WordFrequency]:
    """Count keyword occurrences across texts for word cloud display.

    Words seen fewer than twice overall are dropped.

    Args:
        texts: Report descriptions
        limit: Maximum number of words

    Returns:
        Word frequencies sorted by count descending
    """
    word_counts: Counter = Counter()
    for text in texts:
        word_counts.update(extract_keywords(text))

    # most_common is stable for equal counts (first-seen order)
    return [
        WordFrequency(word=word, count=count)
        for word, count in word_counts.most_common()
        if count >= 2
    ][:limit]
