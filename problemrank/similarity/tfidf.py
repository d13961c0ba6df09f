"""TF-IDF vectorization learned from the current report corpus."""

import math
from collections import Counter
from typing import Iterable, List, Sequence

from pydantic import BaseModel, Field

from problemrank.text.normalizer import extract_keywords
from problemrank.utils.logging_config import get_logger

logger = get_logger()

# Words seen in fewer documents than this are left out of the vocabulary
MIN_DOCUMENT_FREQUENCY = 2


class TfidfVector(BaseModel):
    """Sparse TF-IDF vector with its precomputed L2 norm."""

    values: dict[int, float] = Field(default_factory=dict)
    norm: float = 0.0


class TfidfVectorizer:
    """TF-IDF vectorizer fitted on one filtered corpus.

    IDF values are relative to the corpus they were learned from, so a
    vectorizer is built for every ranking request and thrown away after.
    """

    def __init__(self):
        """Initialize an empty vectorizer."""
        self.vocabulary: dict[str, int] = {}
        self.idf: List[float] = []
        self.doc_count = 0

    @property
    def vocabulary_size(self) -> int:
        return len(self.vocabulary)

    def fit(self, documents: Sequence[str]) -> "TfidfVectorizer":
        """Learn vocabulary and IDF values from a corpus.

        IDF = ln(N / (1 + df)) + 1

        Args:
            documents: Corpus texts

        Returns:
            The fitted vectorizer
        """
        self.vocabulary = {}
        self.idf = []
        self.doc_count = len(documents)

        if self.doc_count == 0:
            return self

        # Counter keeps first-seen order, which fixes vocabulary indices
        doc_freq: Counter = Counter()
        for doc in documents:
            for word in dict.fromkeys(extract_keywords(doc)):
                doc_freq[word] += 1

        for word, freq in doc_freq.items():
            if freq >= MIN_DOCUMENT_FREQUENCY:
                self.vocabulary[word] = len(self.vocabulary)

        self.idf = [
            math.log(self.doc_count / (1 + doc_freq[word])) + 1
            for word in self.vocabulary
        ]

        logger.debug(
            f"Fitted TF-IDF on {self.doc_count} documents: "
            f"{len(doc_freq)} distinct keywords, {self.vocabulary_size} in vocabulary"
        )

        return self

    def transform(self, doc: str) -> TfidfVector:
        """Convert a document to a TF-IDF vector.

        Term frequency is the keyword count divided by the total number of
        keywords in the document. Out-of-vocabulary keywords contribute
        nothing.

        Args:
            doc: Document text

        Returns:
            Sparse TF-IDF vector
        """
        if not self.vocabulary:
            return TfidfVector()

        words = extract_keywords(doc)
        if not words:
            return TfidfVector()

        total_terms = len(words)
        values = {}
        for word, count in Counter(words).items():
            idx = self.vocabulary.get(word)
            if idx is not None:
                values[idx] = (count / total_terms) * self.idf[idx]

        norm = math.sqrt(sum(weight * weight for weight in values.values()))

        return TfidfVector(values=values, norm=norm)

    def fit_transform(self, documents: Sequence[str]) -> List[TfidfVector]:
        """Fit on a corpus and transform each of its documents."""
        self.fit(documents)
        return [self.transform(doc) for doc in documents]

    def top_terms(self, n: int = 10) -> List[str]:
        """Return the n most distinctive vocabulary terms (highest IDF).

        Args:
            n: Number of terms

        Returns:
            Terms sorted by IDF descending, vocabulary order on ties
        """
        ranked = sorted(
            self.vocabulary.items(),
            key=lambda item: self.idf[item[1]],
            reverse=True,
        )
        return [term for term, _ in ranked[:n]]


def cosine_similarity(a: TfidfVector, b: TfidfVector) -> float:
    """Cosine similarity between two sparse TF-IDF vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Similarity score (0.0-1.0); 0.0 when either vector is empty
    """
    if a.norm == 0 or b.norm == 0:
        return 0.0

    # Sorted indices keep the sum identical for (a, b) and (b, a)
    shared = sorted(a.values.keys() & b.values.keys())
    dot_product = sum(a.values[idx] * b.values[idx] for idx in shared)

    return min(dot_product / (a.norm * b.norm), 1.0)


def vectorize_corpus(documents: Iterable[str]) -> tuple[TfidfVectorizer, List[TfidfVector]]:
    """Fit a fresh vectorizer on documents and return it with their vectors."""
    docs = list(documents)
    vectorizer = TfidfVectorizer()
    vectors = vectorizer.fit_transform(docs)
    return vectorizer, vectors
