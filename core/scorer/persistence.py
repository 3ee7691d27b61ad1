#!/usr/bin/env python3
"""
Persistence Operations - Map WorkerSnapshot to and from Worker rows.

The snapshot is always written as a whole: every snapshot column is part of
the same update, so a recompute can never leave a half-old, half-new row.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from database.models import Worker
from core.scorer.models import CategoryMetric, Flag, Tier, Trend, WorkerSnapshot

logger = logging.getLogger(__name__)


def _to_float(value):
    """Convert value to native Python float for database compatibility."""
    if value is None:
        return 0.0
    return float(value)


def _category_metrics_to_json(metrics: List[CategoryMetric]) -> List[Dict[str, Any]]:
    return [
        {
            'category': m.category,
            'jobs': m.jobs,
            'average_score': m.average_score,
            'late_rate': m.late_rate,
            'ncns_rate': m.ncns_rate,
            'trend': m.trend.value,
        }
        for m in metrics
    ]


def _category_metrics_from_json(rows: List[Dict[str, Any]]) -> List[CategoryMetric]:
    return [
        CategoryMetric(
            category=row['category'],
            jobs=int(row['jobs']),
            average_score=_to_float(row.get('average_score')),
            late_rate=_to_float(row.get('late_rate')),
            ncns_rate=_to_float(row.get('ncns_rate')),
            trend=Trend(row.get('trend', Trend.FLAT.value)),
        )
        for row in rows or []
    ]


def snapshot_columns(snapshot: WorkerSnapshot) -> Dict[str, Any]:
    """Column values for every snapshot field on the Worker row."""
    return {
        'performance_score': snapshot.performance_score,
        'reliability_score': snapshot.reliability_score,
        'late_rate': snapshot.late_rate,
        'ncns_rate': snapshot.ncns_rate,
        'tier': snapshot.tier.value,
        'flags': [flag.value for flag in snapshot.flags],
        'flag_reasons': {key: list(value) for key, value in snapshot.flag_reasons.items()},
        'total_jobs': snapshot.total_jobs,
        'completed_count': snapshot.completed_count,
        'late_count': snapshot.late_count,
        'sent_home_count': snapshot.sent_home_count,
        'ncns_count': snapshot.ncns_count,
        'completion_rate': snapshot.completion_rate,
        'sent_home_rate': snapshot.sent_home_rate,
        'last_30_day_score': snapshot.last_30_day_score,
        'category_metrics': _category_metrics_to_json(snapshot.category_metrics),
    }


def save_snapshot(repo, worker: Worker, snapshot: WorkerSnapshot, scored_at: datetime) -> None:
    """Overwrite the worker's snapshot columns via the worker repository."""
    values = snapshot_columns(snapshot)
    values['scored_at'] = scored_at
    repo.workers.update_snapshot(worker, values)
    logger.debug(f"Saved snapshot for worker {worker.id}: tier={snapshot.tier.value}")


def load_snapshot(worker: Worker) -> WorkerSnapshot:
    """Rebuild the current snapshot from a Worker row."""
    return WorkerSnapshot(
        worker_id=worker.id,
        performance_score=_to_float(worker.performance_score),
        reliability_score=_to_float(worker.reliability_score),
        late_rate=_to_float(worker.late_rate),
        ncns_rate=_to_float(worker.ncns_rate),
        tier=Tier(worker.tier or Tier.CRITICAL.value),
        flags=tuple(Flag(value) for value in (worker.flags or [])),
        total_jobs=worker.total_jobs or 0,
        completed_count=worker.completed_count or 0,
        late_count=worker.late_count or 0,
        sent_home_count=worker.sent_home_count or 0,
        ncns_count=worker.ncns_count or 0,
        completion_rate=_to_float(worker.completion_rate),
        sent_home_rate=_to_float(worker.sent_home_rate),
        last_30_day_score=_to_float(worker.last_30_day_score),
        category_metrics=_category_metrics_from_json(worker.category_metrics),
        flag_reasons={key: list(value) for key, value in (worker.flag_reasons or {}).items()},
    )
