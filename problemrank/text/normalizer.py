"""Text normalization for problem report clustering."""

# Indonesian function words that carry no problem signal
STOP_WORDS = frozenset({
    "yang", "dan", "di", "ke", "dari", "untuk", "dengan", "pada", "adalah",
    "ini", "itu", "atau", "tidak", "ada", "oleh", "akan", "sudah", "juga",
    "dapat", "bisa", "lebih", "sebagai", "dalam", "karena", "telah", "saat",
    "setelah", "harus", "menjadi", "seperti", "tersebut", "belum", "sehingga",
    "namun", "bila", "apabila", "bahwa", "yaitu", "antara", "tetapi", "tapi",
})

TOKEN_PUNCTUATION = ".,;:!?\"'()[]{}/-"

MIN_KEYWORD_LENGTH = 3


def normalize(text: str) -> str:
    """Normalize report text for character-level comparison.

    - Lowercase
    - Collapse runs of whitespace into a single space
    - Drop non-printable characters
    - Trim both ends

    Args:
        text: Original report text

    Returns:
        Normalized text
    """
    if not text:
        return ""

    parts = []
    last_was_space = True

    for char in text.lower():
        if char.isspace():
            if not last_was_space:
                parts.append(" ")
                last_was_space = True
        elif char.isprintable():
            parts.append(char)
            last_was_space = False

    return "".join(parts).strip()


def extract_keywords(text: str) -> list[str]:
    """Extract keywords from text.

    Tokens are split on whitespace and stripped of surrounding punctuation.
    Tokens shorter than three characters and stop words are dropped.
    Order and repetitions are preserved.

    Args:
        text: Text to extract keywords from

    Returns:
        List of keywords
    """
    if not text:
        return []

    keywords = []
    for token in text.lower().split():
        word = token.strip(TOKEN_PUNCTUATION)
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS:
            keywords.append(word)

    return keywords
