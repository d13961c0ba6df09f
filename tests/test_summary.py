"""Tests for key phrases and word frequencies."""

from problemrank.ranking.summary import (
    count_word_frequencies,
    extract_key_phrase,
    get_cluster_summary,
    word_importance,
)


def test_word_importance():
    assert word_importance("pecah") == 10
    assert word_importance("aluminium") == 9
    assert word_importance("pemasangan") == 3
    assert word_importance("macet") == 1


def test_cluster_summary_scores_frequency_times_importance():
    summary = get_cluster_summary(
        ["kaca pecah saat packing", "kaca retak waktu packing"],
        max_words=4,
    )

    assert summary == "kaca packing pecah retak"


def test_cluster_summary_counts_once_per_description():
    """Repeating a word inside one description doesn't raise its score."""
    summary = get_cluster_summary(["gudang gudang gudang kaca"], max_words=1)

    assert summary == "kaca"


def test_cluster_summary_single_description_with_repeats():
    assert get_cluster_summary(["kaca retak kaca"], max_words=4) == "retak kaca"


def test_cluster_summary_frequency_outweighs_importance():
    summary = get_cluster_summary(["kaca retak", "kaca penyok", "kaca"], max_words=3)

    assert summary == "kaca retak penyok"


def test_cluster_summary_limits_words():
    summary = get_cluster_summary(["retak kaca frame jendela"], max_words=2)

    assert summary == "retak kaca"


def test_cluster_summary_empty():
    assert get_cluster_summary([]) == ""
    assert get_cluster_summary(["di ke", "yang dan"]) == ""


def test_extract_key_phrase():
    phrase = extract_key_phrase("retak kaca pada frame jendela besar", max_words=3)

    assert phrase == "retak kaca frame"


def test_extract_key_phrase_unique_words():
    assert extract_key_phrase("kaca kaca kaca pecah", max_words=5) == "pecah kaca"


def test_extract_key_phrase_default_word_count():
    phrase = extract_key_phrase("satu dua tiga empat lima enam tujuh", max_words=0)

    assert len(phrase.split()) == 5


def test_word_frequencies_sorted_and_limited():
    texts = [
        "kaca pecah packing",
        "kaca retak packing",
        "kaca baret",
        "engsel longgar",
    ]

    freqs = count_word_frequencies(texts, limit=30)

    assert [(f.word, f.count) for f in freqs] == [("kaca", 3), ("packing", 2)]
    assert len(count_word_frequencies(texts, limit=1)) == 1


def test_word_frequencies_exclude_stop_words():
    texts = ["yang dan kaca pecah", "yang dan kaca retak", "yang dan yang dan"]

    words = [f.word for f in count_word_frequencies(texts)]

    assert "yang" not in words
    assert "dan" not in words
    assert words == ["kaca"]


def test_word_frequencies_count_occurrences():
    """Unlike cluster summaries, every occurrence counts."""
    freqs = count_word_frequencies(["kaca kaca"])

    assert [(f.word, f.count) for f in freqs] == [("kaca", 2)]
