"""Greedy founder-based clustering of problem reports."""

from collections import Counter
from typing import List, Optional, Sequence, Tuple

import numpy as np
from pydantic import BaseModel

from problemrank.models import ClusterStats, ReportItem
from problemrank.ranking.summary import get_cluster_summary
from problemrank.similarity.hybrid import (
    CENTROID_WEIGHTS,
    CLUSTERING_WEIGHTS,
    HybridWeights,
    SimilarityBreakdown,
    compare,
)
from problemrank.similarity.tfidf import TfidfVector, TfidfVectorizer, vectorize_corpus
from problemrank.similarity.trigram import generate_trigrams
from problemrank.utils.logging_config import get_logger

logger = get_logger()

DEFAULT_THRESHOLD = 0.15


class PreparedReport(BaseModel):
    """A report with its trigram set and TF-IDF vector cached for one request."""

    item: ReportItem
    index: int  # Position in the request corpus
    trigrams: frozenset[str]
    vector: TfidfVector

    @property
    def text(self) -> str:
        return self.item.text


class Cluster(BaseModel):
    """A group of similar reports."""

    members: List[PreparedReport]
    centroid_index: int = 0
    rpn_score: float = 0.0

    def __len__(self) -> int:
        return len(self.members)

    @property
    def centroid(self) -> PreparedReport:
        return self.members[self.centroid_index]

    @property
    def centroid_text(self) -> str:
        """Original description of the cluster's representative member."""
        if not self.members:
            return ""
        return self.centroid.text

    def key_phrase(self, max_words: int = 4) -> str:
        """Short summary of the problems in this cluster."""
        descriptions = [member.text for member in self.members if member.text]
        return get_cluster_summary(descriptions, max_words)

    def sample_ids(self, limit: int = 5) -> List[str]:
        """Ids of the first members, in cluster order."""
        return [member.item.id for member in self.members[:limit]]

    def most_common_category(self) -> Optional[str]:
        """Most frequent non-empty category; the first one seen wins ties."""
        counts = Counter(
            member.item.category for member in self.members if member.item.category
        )
        if not counts:
            return None
        return counts.most_common(1)[0][0]


def prepare_reports(items: Sequence[ReportItem]) -> Tuple[List[PreparedReport], TfidfVectorizer]:
    """Fit TF-IDF on the corpus and precompute per-report signals.

    Args:
        items: Report corpus for this request

    Returns:
        Tuple of (prepared reports in input order, fitted vectorizer)
    """
    vectorizer, vectors = vectorize_corpus(item.text for item in items)

    prepared = [
        PreparedReport(
            item=item,
            index=idx,
            trigrams=generate_trigrams(item.text),
            vector=vectors[idx],
        )
        for idx, item in enumerate(items)
    ]

    return prepared, vectorizer


def pair_breakdown(a: PreparedReport, b: PreparedReport) -> SimilarityBreakdown:
    """Similarity signals between two prepared reports."""
    return compare(a.text, a.trigrams, a.vector, b.text, b.trigrams, b.vector)


def cluster_prepared(
    prepared: Sequence[PreparedReport],
    threshold: float = DEFAULT_THRESHOLD,
    weights: HybridWeights = CLUSTERING_WEIGHTS,
) -> List[Cluster]:
    """Group prepared reports in a single greedy pass.

    Each unassigned report founds a new cluster. Every later unassigned
    report joins it when its similarity to the founder reaches the
    threshold. Membership is tested against the founder only, so the
    result depends on input order and is not transitive.

    Args:
        prepared: Prepared reports in input order
        threshold: Minimum combined similarity to the founder
        weights: Weight profile for the combined similarity

    Returns:
        Clusters ordered by founder position
    """
    assigned = [False] * len(prepared)
    clusters = []

    for i, founder in enumerate(prepared):
        if assigned[i]:
            continue

        members = [founder]
        assigned[i] = True

        for j in range(i + 1, len(prepared)):
            if assigned[j]:
                continue

            similarity = pair_breakdown(founder, prepared[j]).combined(weights)
            if similarity >= threshold:
                members.append(prepared[j])
                assigned[j] = True

        clusters.append(Cluster(members=members))

    return clusters


def cluster_reports(
    items: Sequence[ReportItem],
    threshold: float = DEFAULT_THRESHOLD,
    weights: HybridWeights = CLUSTERING_WEIGHTS,
    top_terms_limit: int = 10,
) -> Tuple[List[Cluster], ClusterStats]:
    """Cluster a report corpus and collect clustering stats.

    Args:
        items: Report corpus for this request
        threshold: Similarity threshold for clustering (0.0-1.0)
        weights: Weight profile for the combined similarity
        top_terms_limit: Number of top IDF terms to report

    Returns:
        Tuple of (clusters, stats)
    """
    if not items:
        return [], ClusterStats()

    stats = ClusterStats(
        total_items=len(items),
        threshold=threshold,
        weight_trigram=weights.trigram,
        weight_lcs=weights.lcs,
        weight_tfidf=weights.tfidf,
    )

    logger.info(f"Clustering {len(items)} reports with threshold {threshold}")

    prepared, vectorizer = prepare_reports(items)
    clusters = cluster_prepared(prepared, threshold=threshold, weights=weights)

    stats.vocabulary_size = vectorizer.vocabulary_size
    stats.top_terms = vectorizer.top_terms(top_terms_limit)
    stats.cluster_count = len(clusters)

    logger.info(
        f"Clustering complete: {len(clusters)} clusters, "
        f"vocabulary size {vectorizer.vocabulary_size}"
    )

    return clusters, stats


def select_centroid(cluster: Cluster, weights: HybridWeights = CENTROID_WEIGHTS) -> int:
    """Pick the member with the lowest average distance to the others.

    Distance is ``1 - similarity`` under the centroid weight profile.
    Ties resolve to the earliest member.

    Args:
        cluster: Cluster to update in place
        weights: Weight profile for the combined similarity

    Returns:
        The selected centroid index
    """
    size = len(cluster.members)
    if size <= 1:
        cluster.centroid_index = 0
        return 0

    distances = np.zeros((size, size))
    for i in range(size):
        for j in range(i + 1, size):
            similarity = pair_breakdown(cluster.members[i], cluster.members[j]).combined(weights)
            distances[i, j] = distances[j, i] = 1.0 - similarity

    avg_distances = distances.sum(axis=1) / (size - 1)
    cluster.centroid_index = int(np.argmin(avg_distances))

    logger.debug(
        f"Centroid of {size}-member cluster: member {cluster.centroid_index} "
        f"(avg distance {avg_distances[cluster.centroid_index]:.3f})"
    )

    return cluster.centroid_index
