#!/usr/bin/env python3
"""
Reliability Calculations - Attendance-based reliability score and rates.

Each incident carries a fixed penalty (late -0.3, sent home -0.7, NCNS -1.5
by default). The summed penalty is normalised by total jobs and subtracted
from the maximum score of 5, then clamped to [0, 5]. A worker with no jobs
has demonstrated no unreliability and scores exactly 5.
"""

from typing import Optional
import logging

from core.config_loader import IncidentPenalties
from core.exceptions import MalformedHistoryException
from core.scorer.models import ReliabilityCounts
from core.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

MAX_SCORE = 5.0


def _validate_counts(counts: ReliabilityCounts) -> None:
    for name in ('total_jobs', 'late', 'sent_home', 'ncns', 'completed'):
        value = getattr(counts, name)
        if value < 0:
            raise MalformedHistoryException(f"{name} must not be negative, got {value}")


def calculate_rate(count: int, total_jobs: int) -> float:
    """count / total_jobs rounded to 4 decimals; 0.0 when there are no jobs."""
    if count < 0 or total_jobs < 0:
        raise MalformedHistoryException(
            f"Counts must not be negative (count={count}, total_jobs={total_jobs})"
        )
    if total_jobs == 0:
        return 0.0
    return round_half_up(count / total_jobs, 4)


def calculate_late_rate(counts: ReliabilityCounts) -> float:
    return calculate_rate(counts.late, counts.total_jobs)


def calculate_ncns_rate(counts: ReliabilityCounts) -> float:
    return calculate_rate(counts.ncns, counts.total_jobs)


def calculate_sent_home_rate(counts: ReliabilityCounts) -> float:
    return calculate_rate(counts.sent_home, counts.total_jobs)


def calculate_completion_rate(counts: ReliabilityCounts) -> float:
    return calculate_rate(counts.completed, counts.total_jobs)


def calculate_reliability_score(
    counts: ReliabilityCounts,
    penalties: Optional[IncidentPenalties] = None,
    max_score: float = MAX_SCORE
) -> float:
    """
    Reliability score in [0, max_score], rounded to 2 decimals.

    Args:
        counts: Total jobs and incident counts across all assignments
        penalties: Per-incident penalties (negative numbers)
        max_score: Score for a spotless record

    Returns:
        max_score for zero jobs, otherwise max_score + normalised penalty, clamped
    """
    _validate_counts(counts)
    penalties = penalties or IncidentPenalties()

    if counts.total_jobs == 0:
        return max_score

    penalty_total = (
        counts.late * penalties.late
        + counts.sent_home * penalties.sent_home
        + counts.ncns * penalties.ncns
    )
    normalized_penalty = penalty_total / counts.total_jobs

    return round_half_up(clamp(max_score + normalized_penalty, 0.0, max_score), 2)
