#!/usr/bin/env python3
"""
Flag Policy - "needs review" and "terminate recommended" predicates.

Both predicates are evaluated from scratch on every recompute, so a flag
disappears as soon as none of its clauses hold any more. Each clause that
fires contributes a human-readable reason.
"""

from typing import List, Optional
import logging

from core.config_loader import NeedsReviewPolicy, ScorerConfig, TerminatePolicy
from core.scorer.models import (
    Flag, FlagResult, NeedsReviewInput, TerminateRecommendedInput
)

logger = logging.getLogger(__name__)

TREND_LENGTH = 5


def has_downward_trend(recent_scores: List[float], length: int = TREND_LENGTH) -> bool:
    """
    True only for a strict losing streak across the `length` most recent jobs.

    Args:
        recent_scores: Combined ratings ordered most recent first

    Fewer than `length` data points never counts as a trend.
    """
    if len(recent_scores) < length:
        return False

    window = recent_scores[:length]
    return all(window[i] < window[i - 1] for i in range(1, length))


def needs_review_reasons(
    data: NeedsReviewInput,
    policy: Optional[NeedsReviewPolicy] = None
) -> List[str]:
    policy = policy or NeedsReviewPolicy()
    reasons = []

    if data.performance_score < policy.max_performance_score:
        reasons.append(
            f"Performance score {data.performance_score:.2f} below {policy.max_performance_score:.2f}"
        )
    if data.ncns_rate > policy.max_ncns_rate:
        reasons.append(f"NCNS rate {data.ncns_rate:.4f} above {policy.max_ncns_rate:.2f}")
    if data.incidents_in_window >= policy.max_recent_incidents:
        reasons.append(
            f"{data.incidents_in_window} attendance incidents in the past "
            f"{policy.incident_window_days} days"
        )
    if has_downward_trend(data.recent_scores, policy.trend_length):
        reasons.append(f"Downward trend across the last {policy.trend_length} rated jobs")

    return reasons


def terminate_recommended_reasons(
    data: TerminateRecommendedInput,
    policy: Optional[TerminatePolicy] = None
) -> List[str]:
    policy = policy or TerminatePolicy()
    reasons = []

    if data.ncns_rate > policy.max_ncns_rate:
        reasons.append(f"NCNS rate {data.ncns_rate:.4f} above {policy.max_ncns_rate:.2f}")
    if data.ncns_in_recent_assignments >= policy.max_recent_ncns:
        reasons.append(
            f"{data.ncns_in_recent_assignments} NCNS incidents in the most recent "
            f"{policy.recent_assignment_window} assignments"
        )
    if (data.performance_score < policy.min_performance_score
            and data.total_jobs >= policy.min_jobs_for_performance):
        reasons.append(
            f"Performance score {data.performance_score:.2f} below "
            f"{policy.min_performance_score:.2f} over {data.total_jobs} jobs"
        )
    if data.severe_incident:
        reasons.append("Severe incident on record")

    return reasons


def should_flag_needs_review(
    data: NeedsReviewInput,
    policy: Optional[NeedsReviewPolicy] = None
) -> bool:
    return bool(needs_review_reasons(data, policy))


def should_flag_terminate_recommended(
    data: TerminateRecommendedInput,
    policy: Optional[TerminatePolicy] = None
) -> bool:
    return bool(terminate_recommended_reasons(data, policy))


def evaluate_flags(
    needs_review_input: NeedsReviewInput,
    terminate_input: TerminateRecommendedInput,
    config: Optional[ScorerConfig] = None
) -> FlagResult:
    """Evaluate both predicates and collect the active flag set with reasons."""
    config = config or ScorerConfig()
    result = FlagResult()

    review = needs_review_reasons(needs_review_input, config.needs_review)
    if review:
        result.flags.append(Flag.NEEDS_REVIEW)
        result.reasons[Flag.NEEDS_REVIEW.value] = review

    terminate = terminate_recommended_reasons(terminate_input, config.terminate)
    if terminate:
        result.flags.append(Flag.TERMINATE_RECOMMENDED)
        result.reasons[Flag.TERMINATE_RECOMMENDED.value] = terminate

    return result
