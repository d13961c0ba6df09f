"""Problem ranking service: clustering, scoring and summaries."""

import datetime as dt
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from problemrank.config import Config, get_config
from problemrank.database import ReportStore
from problemrank.models import (
    ClusterStats,
    RankedProblem,
    RankingDebugInfo,
    ReportFilters,
    ReportItem,
    SimilarityPair,
    WordFrequency,
)
from problemrank.ranking.clusterer import cluster_reports, pair_breakdown, prepare_reports, select_centroid
from problemrank.ranking.rpn import calculate_rpn, sort_clusters_by_rpn
from problemrank.ranking.summary import count_word_frequencies
from problemrank.utils.logging_config import get_logger

logger = get_logger()

CorpusEntry = Union[ReportItem, tuple]

DEBUG_TEXT_LENGTH = 50


def as_report_items(corpus: Iterable[CorpusEntry]) -> List[ReportItem]:
    """Accept report items or ``(id, text, category, date)`` tuples."""
    return [
        entry if isinstance(entry, ReportItem) else ReportItem.from_tuple(entry)
        for entry in corpus
    ]


def truncate_text(text: str, max_len: int = DEBUG_TEXT_LENGTH) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def rank_top_problems(
    corpus: Iterable[CorpusEntry],
    limit: Optional[int] = None,
    config: Optional[Config] = None,
    now: Optional[dt.datetime] = None,
    show_progress: bool = False,
) -> Tuple[List[RankedProblem], ClusterStats]:
    """Rank recurring problems by RPN.

    Clusters the corpus, picks a centroid and computes the RPN of every
    cluster, then returns the top clusters as ranked problems.

    Args:
        corpus: Filtered reports for this request
        limit: Number of ranked problems to return
        config: Configuration (defaults to the global config)
        now: Reference time for recency scoring
        show_progress: Show a progress bar while scoring clusters

    Returns:
        Tuple of (ranked problems, clustering stats)
    """
    config = config or get_config()
    if limit is None:
        limit = config.top_problems_limit
    items = as_report_items(corpus)

    clusters, stats = cluster_reports(
        items,
        threshold=config.clustering_threshold,
        weights=config.clustering_weights,
        top_terms_limit=config.top_terms_limit,
    )

    if not clusters:
        logger.info("No reports to rank")
        return [], stats

    rpn_config = config.rpn_config()
    for cluster in tqdm(clusters, desc="Scoring clusters", disable=not show_progress):
        select_centroid(cluster, config.centroid_weights)
        calculate_rpn(cluster, rpn_config, now=now)

    sort_clusters_by_rpn(clusters)
    top_clusters = clusters[:limit]

    ranked = [
        RankedProblem(
            rank=rank,
            description=cluster.key_phrase(config.key_phrase_words),
            frequency=len(cluster),
            rpn_score=cluster.rpn_score,
            category=cluster.most_common_category(),
            sample_ids=cluster.sample_ids(config.sample_id_limit),
            centroid_text=cluster.centroid_text,
            algorithm_info=f"Vocab: {stats.vocabulary_size}, Cluster size: {len(cluster)}",
        )
        for rank, cluster in enumerate(top_clusters, start=1)
    ]

    logger.info(f"Ranked {len(ranked)} of {len(clusters)} clusters from {len(items)} reports")

    return ranked, stats


def word_cloud(corpus: Iterable[CorpusEntry], limit: int = 30) -> List[WordFrequency]:
    """Word frequencies across the corpus for word cloud display."""
    items = as_report_items(corpus)
    return count_word_frequencies((item.text for item in items), limit)


def debug_similarity(
    corpus: Iterable[CorpusEntry],
    config: Optional[Config] = None,
) -> RankingDebugInfo:
    """Pairwise similarity breakdown for the leading reports.

    Args:
        corpus: Filtered reports for this request
        config: Configuration (defaults to the global config)

    Returns:
        Clustering stats plus trigram/LCS/TF-IDF/combined scores for every
        pair among the first ``config.debug_pair_limit`` reports
    """
    config = config or get_config()
    items = as_report_items(corpus)

    _, stats = cluster_reports(
        items,
        threshold=config.clustering_threshold,
        weights=config.clustering_weights,
        top_terms_limit=config.top_terms_limit,
    )

    if not items:
        return RankingDebugInfo(stats=stats)

    # IDF still comes from the whole corpus
    prepared, _ = prepare_reports(items)
    leading = prepared[:config.debug_pair_limit]

    pairs = []
    for i, first in enumerate(leading):
        for second in leading[i + 1:]:
            breakdown = pair_breakdown(first, second)
            pairs.append(
                SimilarityPair(
                    item1_id=first.item.id,
                    item1=truncate_text(first.text),
                    item2_id=second.item.id,
                    item2=truncate_text(second.text),
                    trigram_similarity=breakdown.trigram,
                    lcs_similarity=breakdown.lcs,
                    tfidf_similarity=breakdown.tfidf,
                    combined_similarity=breakdown.combined(config.clustering_weights),
                )
            )

    return RankingDebugInfo(stats=stats, similarity_pairs=pairs)


class RankingService:
    """Ranking operations over reports fetched from a report store."""

    def __init__(self, store: ReportStore, config: Optional[Config] = None):
        """Initialize the service.

        Args:
            store: Connected report store
            config: Configuration (defaults to the global config)
        """
        self.store = store
        self.config = config or get_config()

    def fetch(self, filters: Optional[ReportFilters] = None) -> Sequence[ReportItem]:
        return self.store.fetch_filtered(filters or ReportFilters())

    def get_top_problems(
        self,
        limit: Optional[int] = None,
        filters: Optional[ReportFilters] = None,
        show_progress: bool = False,
    ) -> Tuple[List[RankedProblem], ClusterStats]:
        """Rank the reports matching the filters."""
        return rank_top_problems(
            self.fetch(filters),
            limit=limit,
            config=self.config,
            show_progress=show_progress,
        )

    def get_word_cloud(
        self,
        limit: Optional[int] = None,
        filters: Optional[ReportFilters] = None,
    ) -> List[WordFrequency]:
        """Word frequencies of the reports matching the filters."""
        if limit is None:
            limit = self.config.word_cloud_limit
        return word_cloud(self.fetch(filters), limit)

    def get_debug_info(self, filters: Optional[ReportFilters] = None) -> RankingDebugInfo:
        """Similarity diagnostics for the reports matching the filters."""
        return debug_similarity(self.fetch(filters), config=self.config)
