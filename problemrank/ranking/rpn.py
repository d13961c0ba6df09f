"""Risk Priority Number scoring for problem clusters."""

import datetime as dt
import math
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from problemrank.ranking.clusterer import Cluster

MAX_RPN = 100.0

# Used when no member of a cluster carries a date
NEUTRAL_RECENCY = 5.0


class RPNConfig(BaseModel):
    """Configuration for RPN calculation."""

    model_config = {"frozen": True}

    frequency_weight: float = Field(default=0.6, ge=0.0)
    recency_weight: float = Field(default=0.4, ge=0.0)
    recency_days: float = Field(default=90, gt=0)  # Decay window (3 months)


def frequency_score(member_count: int) -> float:
    """Logarithmic frequency score so large clusters don't dominate linearly."""
    return math.log10(member_count + 1) * 10


def days_since(value: Union[dt.date, dt.datetime], now: dt.datetime) -> float:
    """Fractional days between a report date and ``now``, never negative."""
    if not isinstance(value, dt.datetime):
        value = dt.datetime.combine(value, dt.time.min)

    # Compare naive with naive and aware with aware
    if value.tzinfo is not None and now.tzinfo is None:
        value = value.astimezone().replace(tzinfo=None)
    elif value.tzinfo is None and now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)

    elapsed = (now - value).total_seconds() / 86400
    return max(elapsed, 0.0)


def recency_score(
    cluster: Cluster,
    recency_days: float = 90,
    now: Optional[dt.datetime] = None,
) -> float:
    """Average exponential recency of the dated members of a cluster.

    Each dated member scores ``10 * exp(-days_since / recency_days)``.

    Args:
        cluster: Cluster to score
        recency_days: Decay window in days
        now: Reference time (defaults to the current local time)

    Returns:
        Score from 0 (old) to 10 (recent); 5.0 when no member is dated
    """
    if not cluster.members:
        return 0.0

    now = now or dt.datetime.now()

    scores = [
        10 * math.exp(-days_since(member.item.date, now) / recency_days)
        for member in cluster.members
        if member.item.date is not None
    ]

    if not scores:
        return NEUTRAL_RECENCY

    return sum(scores) / len(scores)


def calculate_rpn(
    cluster: Cluster,
    config: Optional[RPNConfig] = None,
    now: Optional[dt.datetime] = None,
) -> float:
    """Calculate and store the Risk Priority Number of a cluster.

    RPN = (frequency * frequency_weight + recency * recency_weight) * 10,
    clamped to [0, 100].

    Args:
        cluster: Cluster to update in place
        config: RPN configuration
        now: Reference time for recency

    Returns:
        The cluster's RPN score
    """
    config = config or RPNConfig()

    if not cluster.members:
        cluster.rpn_score = 0.0
        return cluster.rpn_score

    rpn = (
        frequency_score(len(cluster.members)) * config.frequency_weight
        + recency_score(cluster, config.recency_days, now) * config.recency_weight
    )

    cluster.rpn_score = min(max(rpn * 10, 0.0), MAX_RPN)
    return cluster.rpn_score


def sort_clusters_by_rpn(clusters: List[Cluster]) -> List[Cluster]:
    """Sort clusters by RPN descending, keeping input order on ties.

    Args:
        clusters: Clusters to sort in place

    Returns:
        The same list, sorted
    """
    clusters.sort(key=lambda cluster: cluster.rpn_score, reverse=True)
    return clusters
