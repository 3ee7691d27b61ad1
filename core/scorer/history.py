#!/usr/bin/env python3
"""
History Derivation - Turn a worker's full assignment history into scoring inputs.

Pure computation over plain records; the service layer does the reading.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from core.config_loader import ScorerConfig
from core.scorer.models import (
    AssignmentHistory, EventType, INCIDENT_TYPES, RatedJob, ReliabilityCounts, ScoringInputs
)
from core.scorer.ratings import combined_rating
from core.utils import as_utc


def _most_recent_first(history: List[AssignmentHistory]) -> List[AssignmentHistory]:
    return sorted(
        history,
        key=lambda item: (as_utc(item.scheduled_start), item.assignment_id),
        reverse=True
    )


def count_events(history: List[AssignmentHistory]) -> ReliabilityCounts:
    """Count every event on every assignment, not just the latest per assignment."""
    counts = ReliabilityCounts(total_jobs=len(history))
    for item in history:
        for event in item.events:
            if event.event_type == EventType.LATE:
                counts.late += 1
            elif event.event_type == EventType.SENT_HOME:
                counts.sent_home += 1
            elif event.event_type == EventType.NCNS:
                counts.ncns += 1
            elif event.event_type == EventType.COMPLETED:
                counts.completed += 1
    return counts


def count_incidents_in_window(
    history: List[AssignmentHistory],
    now: datetime,
    window_days: int
) -> int:
    """Incident events (late, sent home, NCNS) that occurred in [now - window, now]."""
    now = as_utc(now)
    window_start = now - timedelta(days=window_days)
    return sum(
        1
        for item in history
        for event in item.events
        if event.event_type in INCIDENT_TYPES
        and window_start <= as_utc(event.occurred_at) <= now
    )


def count_ncns_in_recent_assignments(history: List[AssignmentHistory], window: int) -> int:
    """NCNS events across the `window` most recent assignments by scheduled start."""
    recent = _most_recent_first(history)[:window]
    return sum(
        1 for item in recent for event in item.events if event.event_type == EventType.NCNS
    )


def recent_combined_scores(
    history: List[AssignmentHistory],
    limit: int,
    config: Optional[ScorerConfig] = None
) -> List[float]:
    """Combined ratings, most recent first, truncated to `limit`. Unrated jobs are skipped."""
    config = config or ScorerConfig()
    scores = []
    for item in _most_recent_first(history):
        score = combined_rating(item.staff_rating, item.customer_rating, config.rating_weights)
        if score is not None:
            scores.append(score)
        if len(scores) == limit:
            break
    return scores


def derive_inputs(
    history: List[AssignmentHistory],
    now: datetime,
    config: Optional[ScorerConfig] = None
) -> ScoringInputs:
    config = config or ScorerConfig()

    rated_jobs = [
        RatedJob(
            scheduled_start=item.scheduled_start,
            staff_rating=item.staff_rating,
            customer_rating=item.customer_rating
        )
        for item in history
    ]

    return ScoringInputs(
        total_jobs=len(history),
        rated_jobs=rated_jobs,
        counts=count_events(history),
        incidents_in_window=count_incidents_in_window(
            history, now, config.needs_review.incident_window_days
        ),
        ncns_in_recent_assignments=count_ncns_in_recent_assignments(
            history, config.terminate.recent_assignment_window
        ),
        recent_scores=recent_combined_scores(history, config.needs_review.trend_length, config)
    )
