#!/usr/bin/env python3
"""
Worker Status - Coarse staffing label derived from a snapshot.

Priority order: terminate > high risk > needs review > strong.
"""

from typing import Optional

from core.config_loader import WorkerStatusPolicy
from core.scorer.models import Flag, WorkerSnapshot, WorkerStatus


def derive_worker_status(
    snapshot: WorkerSnapshot,
    policy: Optional[WorkerStatusPolicy] = None
) -> WorkerStatus:
    policy = policy or WorkerStatusPolicy()

    if snapshot.has_flag(Flag.TERMINATE_RECOMMENDED):
        return WorkerStatus.TERMINATE

    if (snapshot.ncns_rate >= policy.high_risk_ncns_rate
            or snapshot.late_rate >= policy.high_risk_late_rate
            or snapshot.reliability_score < policy.high_risk_reliability
            or snapshot.performance_score < policy.high_risk_performance):
        return WorkerStatus.HIGH_RISK

    if (snapshot.has_flag(Flag.NEEDS_REVIEW)
            or snapshot.performance_score < policy.strong_performance):
        return WorkerStatus.NEEDS_REVIEW

    return WorkerStatus.STRONG
