#!/usr/bin/env python3
"""
Scoring Module - Worker scoring and flagging engine.

Public API:
- ScoringService: recompute orchestrator (recalculate(worker_id))
- WorkerSnapshot: Dataclass for the derived scoring record

Focused, single-responsibility modules:

- models.py: Data structures (history records, policy inputs, WorkerSnapshot)
- ratings.py: Combined rating, recency-weighted performance score, category metrics
- reliability.py: Reliability score, late/NCNS/completion rates
- tiers.py: Performance score -> tier
- flags.py: Needs-review and terminate-recommended policies
- history.py: Derive scoring inputs from full history
- status.py: Coarse staffing status from a snapshot
- persistence.py: Snapshot <-> Worker row mapping
- service.py: ScoringService orchestrator
"""

from core.scorer.models import WorkerSnapshot
from core.scorer.service import ScoringService

__all__ = ['ScoringService', 'WorkerSnapshot']
