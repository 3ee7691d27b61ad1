#!/usr/bin/env python3
"""
Rating Calculations - Combined job ratings and the recency-weighted performance score.

A job's combined rating blends the customer and staff overall scores
(0.65 / 0.35 by default). The performance score is a linear recency-weighted
mean of combined ratings: the earliest rated job has weight 1, the most
recent has weight N.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import logging

from core.config_loader import RatingWeights, ScorerConfig
from core.exceptions import MalformedHistoryException
from core.scorer.models import (
    AssignmentHistory, CategoryMetric, EventType, RatedJob, Trend
)
from core.utils import as_utc, round_half_up

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(value: Optional[int], source: str) -> None:
    """Fail fast on ratings outside 1-5; upstream validation should have rejected them."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedHistoryException(f"{source} rating must be an integer, got {value!r}")
    if not MIN_RATING <= value <= MAX_RATING:
        raise MalformedHistoryException(
            f"{source} rating must be between {MIN_RATING} and {MAX_RATING}, got {value}"
        )


def combined_rating(
    staff_rating: Optional[int],
    customer_rating: Optional[int],
    weights: Optional[RatingWeights] = None
) -> Optional[float]:
    """Blend staff and customer ratings for one job.

    Returns None when neither rating exists.
    """
    validate_rating(staff_rating, "staff")
    validate_rating(customer_rating, "customer")
    weights = weights or RatingWeights()

    if staff_rating is None and customer_rating is None:
        return None
    if staff_rating is not None and customer_rating is not None:
        return customer_rating * weights.customer + staff_rating * weights.staff
    return float(customer_rating if customer_rating is not None else staff_rating)


def calculate_performance_score(
    jobs: List[RatedJob],
    weights: Optional[RatingWeights] = None
) -> float:
    """
    Recency-weighted mean of combined ratings, rounded to 2 decimals.

    Jobs without any rating are skipped before ranks are assigned, so a gap
    in ratings does not create a gap in weights. No rated jobs yields 0.0.
    """
    ordered = sorted(jobs, key=lambda job: as_utc(job.scheduled_start))
    scores = [
        score for score in (
            combined_rating(job.staff_rating, job.customer_rating, weights) for job in ordered
        )
        if score is not None
    ]

    if not scores:
        return 0.0

    total_weight = 0
    weighted_total = 0.0
    for rank, score in enumerate(scores, start=1):
        total_weight += rank
        weighted_total += rank * score

    return round_half_up(weighted_total / total_weight, 2)


def calculate_recent_score(
    history: List[AssignmentHistory],
    now: datetime,
    window_days: int = 30,
    weights: Optional[RatingWeights] = None
) -> float:
    """Plain mean of combined ratings for assignments scheduled in the trailing window."""
    window_start = as_utc(now) - timedelta(days=window_days)
    scores = []
    for item in history:
        start = as_utc(item.scheduled_start)
        if window_start <= start <= as_utc(now):
            score = combined_rating(item.staff_rating, item.customer_rating, weights)
            if score is not None:
                scores.append(score)

    if not scores:
        return 0.0
    return round_half_up(sum(scores) / len(scores), 2)


def _trend(scores: List[float]) -> Trend:
    """Compare the two most recent rated jobs (scores ordered oldest first)."""
    if len(scores) < 2:
        return Trend.FLAT
    if scores[-1] > scores[-2]:
        return Trend.UP
    if scores[-1] < scores[-2]:
        return Trend.DOWN
    return Trend.FLAT


def calculate_category_metrics(
    history: List[AssignmentHistory],
    config: Optional[ScorerConfig] = None
) -> List[CategoryMetric]:
    """Per-category job count, average combined rating, late/NCNS rates and trend.

    Sorted by job count (highest first), then category name.
    """
    config = config or ScorerConfig()
    grouped: Dict[str, List[AssignmentHistory]] = defaultdict(list)
    for item in history:
        grouped[item.category].append(item)

    metrics = []
    for category, items in grouped.items():
        items = sorted(items, key=lambda i: (as_utc(i.scheduled_start), i.assignment_id))
        scores = [
            s for s in (
                combined_rating(i.staff_rating, i.customer_rating, config.rating_weights)
                for i in items
            )
            if s is not None
        ]
        late = sum(1 for i in items for e in i.events if e.event_type == EventType.LATE)
        ncns = sum(1 for i in items for e in i.events if e.event_type == EventType.NCNS)
        jobs = len(items)

        metrics.append(CategoryMetric(
            category=category,
            jobs=jobs,
            average_score=round_half_up(sum(scores) / len(scores), 2) if scores else 0.0,
            late_rate=round_half_up(late / jobs, 4),
            ncns_rate=round_half_up(ncns / jobs, 4),
            trend=_trend(scores)
        ))

    metrics.sort(key=lambda m: (-m.jobs, m.category))
    return metrics
