"""Tests for greedy clustering and centroid selection."""

import pytest

from problemrank.models import ClusterStats, ReportItem
from problemrank.ranking.clusterer import (
    Cluster,
    cluster_prepared,
    cluster_reports,
    prepare_reports,
    select_centroid,
)
from problemrank.similarity.hybrid import CLUSTERING_WEIGHTS


def member_ids(cluster):
    return [member.item.id for member in cluster.members]


def test_glass_scenario(glass_corpus):
    """Paraphrased glass defects group together, the paint issue stays alone."""
    clusters, stats = cluster_reports(glass_corpus, threshold=0.15)

    assert [member_ids(c) for c in clusters] == [["1", "2"], ["3"]]
    assert stats.cluster_count == 2
    assert stats.total_items == 3
    assert stats.vocabulary_size == 2
    assert stats.top_terms == ["kaca", "packing"]
    assert stats.threshold == 0.15
    assert (stats.weight_trigram, stats.weight_lcs, stats.weight_tfidf) == (0.25, 0.15, 0.60)


def test_distinct_reports_stay_singletons(distinct_corpus):
    clusters, stats = cluster_reports(distinct_corpus)

    assert [member_ids(c) for c in clusters] == [["1"], ["2"], ["3"], ["4"], ["5"]]
    assert stats.vocabulary_size == 0


def test_clustering_is_a_partition(mixed_corpus):
    """Every report lands in exactly one cluster."""
    clusters, stats = cluster_reports(mixed_corpus)

    ids = [report_id for cluster in clusters for report_id in member_ids(cluster)]
    assert sorted(ids) == sorted(item.id for item in mixed_corpus)
    assert len(ids) == len(set(ids))
    assert sum(len(c) for c in clusters) == len(mixed_corpus)
    assert stats.cluster_count == len(clusters)


def test_clusters_ordered_by_founder(mixed_corpus):
    clusters, _ = cluster_reports(mixed_corpus)

    founders = [cluster.members[0].index for cluster in clusters]
    assert founders == sorted(founders)
    assert founders[0] == 0


def test_related_reports_share_a_cluster(mixed_corpus):
    clusters, _ = cluster_reports(mixed_corpus)

    glass = next(c for c in clusters if "1" in member_ids(c))
    assert {"1", "3", "8"} <= set(member_ids(glass))


def test_empty_text_forms_singleton(mixed_corpus):
    """Reports without text still participate."""
    clusters, _ = cluster_reports(mixed_corpus)

    assert ["9"] in [member_ids(c) for c in clusters]


def test_empty_corpus():
    clusters, stats = cluster_reports([])

    assert clusters == []
    assert stats.total_items == 0
    assert stats.cluster_count == 0
    assert stats == ClusterStats()


def test_threshold_controls_grouping(glass_corpus):
    """A threshold of zero merges everything into the first cluster."""
    clusters, _ = cluster_reports(glass_corpus, threshold=0.0)
    assert [member_ids(c) for c in clusters] == [["1", "2", "3"]]

    clusters, _ = cluster_reports(glass_corpus, threshold=1.0)
    assert len(clusters) == 3


def test_membership_is_tested_against_founder_only():
    """A report similar to a member but not to the founder starts a new cluster."""
    items = [
        ReportItem(id="a", text="aaaa bbbb"),
        ReportItem(id="b", text="bbbb cccc"),
        ReportItem(id="c", text="cccc dddd"),
    ]
    prepared, _ = prepare_reports(items)

    clusters = cluster_prepared(prepared, threshold=0.3, weights=CLUSTERING_WEIGHTS)

    assert [member_ids(c) for c in clusters] == [["a", "b"], ["c"]]


def test_prepare_reports_caches_signals(glass_corpus):
    prepared, vectorizer = prepare_reports(glass_corpus)

    assert [p.index for p in prepared] == [0, 1, 2]
    assert prepared[0].trigrams
    assert prepared[0].vector.norm > 0
    assert prepared[2].vector.norm == 0
    assert vectorizer.vocabulary_size == 2


class TestCentroid:
    """Tests for centroid selection."""

    def test_singleton_centroid(self, glass_corpus):
        prepared, _ = prepare_reports(glass_corpus)
        cluster = Cluster(members=[prepared[2]])

        assert select_centroid(cluster) == 0
        assert cluster.centroid_text == "warna cat berbeda"

    def test_tie_resolves_to_first_member(self):
        """Two identical members tie; the earlier one wins."""
        items = [
            ReportItem(id="1", text="pintu macet"),
            ReportItem(id="2", text="kaca pecah saat packing"),
            ReportItem(id="3", text="kaca pecah saat packing"),
        ]
        prepared, _ = prepare_reports(items)
        cluster = Cluster(members=prepared)

        assert select_centroid(cluster) == 1
        assert cluster.centroid.item.id == "2"

    def test_centroid_is_valid_member(self, mixed_corpus):
        clusters, _ = cluster_reports(mixed_corpus)

        for cluster in clusters:
            select_centroid(cluster)
            assert 0 <= cluster.centroid_index < len(cluster)


class TestClusterHelpers:
    """Tests for cluster summary helpers."""

    def make_cluster(self, items):
        prepared, _ = prepare_reports(items)
        return Cluster(members=prepared)

    def test_sample_ids_limit(self):
        cluster = self.make_cluster([ReportItem(id=str(i), text="kaca pecah") for i in range(8)])

        assert cluster.sample_ids() == ["0", "1", "2", "3", "4"]
        assert cluster.sample_ids(limit=2) == ["0", "1"]

    @pytest.mark.parametrize(
        "categories,expected",
        [
            (["A", None, "B", "B"], "B"),
            (["A", "B"], "A"),
            ([None, None], None),
            (["", "C"], "C"),
        ],
    )
    def test_most_common_category(self, categories, expected):
        cluster = self.make_cluster(
            [ReportItem(id=str(i), text="kaca", category=c) for i, c in enumerate(categories)]
        )

        assert cluster.most_common_category() == expected

    def test_key_phrase(self, glass_corpus):
        cluster = self.make_cluster(glass_corpus[:2])

        assert cluster.key_phrase(4) == "kaca packing pecah retak"
