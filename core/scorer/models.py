#!/usr/bin/env python3
"""
Scoring Models - Data structures flowing through the scoring engine.

History records (AssignmentHistory, AttendanceRecord) are plain data handed
over by the persistence layer. Policy inputs (RatedJob, ReliabilityCounts,
NeedsReviewInput, TerminateRecommendedInput) feed the pure scoring and flag
functions. WorkerSnapshot is the single derived record that gets persisted.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple


class EventType(str, Enum):
    COMPLETED = "completed"
    LATE = "late"
    SENT_HOME = "sent_home"
    NCNS = "ncns"


INCIDENT_TYPES = frozenset({EventType.LATE, EventType.SENT_HOME, EventType.NCNS})


class JobCategory(str, Enum):
    WAREHOUSE = "warehouse"
    CLEANUP = "cleanup"
    JANITORIAL = "janitorial"
    EVENTS = "events"
    GENERAL = "general"


class Tier(str, Enum):
    ELITE = "Elite"
    STRONG = "Strong"
    SOLID = "Solid"
    AT_RISK = "At Risk"
    CRITICAL = "Critical"


class Flag(str, Enum):
    NEEDS_REVIEW = "needs-review"
    TERMINATE_RECOMMENDED = "terminate-recommended"


class WorkerStatus(str, Enum):
    STRONG = "strong"
    NEEDS_REVIEW = "needs_review"
    HIGH_RISK = "high_risk"
    TERMINATE = "terminate"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


@dataclass
class AttendanceRecord:
    event_type: EventType
    occurred_at: datetime


@dataclass
class AssignmentHistory:
    """Everything the engine needs to know about one assignment."""
    assignment_id: str
    category: str
    scheduled_start: datetime
    staff_rating: Optional[int] = None
    customer_rating: Optional[int] = None
    events: List[AttendanceRecord] = field(default_factory=list)


@dataclass
class RatedJob:
    scheduled_start: datetime
    staff_rating: Optional[int] = None
    customer_rating: Optional[int] = None


@dataclass
class ReliabilityCounts:
    total_jobs: int
    late: int = 0
    sent_home: int = 0
    ncns: int = 0
    completed: int = 0


@dataclass
class NeedsReviewInput:
    performance_score: float
    ncns_rate: float
    incidents_in_window: int
    # Combined ratings, most recent first
    recent_scores: List[float] = field(default_factory=list)


@dataclass
class TerminateRecommendedInput:
    performance_score: float
    total_jobs: int
    ncns_rate: float
    ncns_in_recent_assignments: int
    severe_incident: bool = False


@dataclass
class FlagResult:
    flags: List[Flag] = field(default_factory=list)
    reasons: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class CategoryMetric:
    category: str
    jobs: int
    average_score: float
    late_rate: float
    ncns_rate: float
    trend: Trend = Trend.FLAT


@dataclass
class ScoringInputs:
    """Aggregates derived from a worker's full history."""
    total_jobs: int
    rated_jobs: List[RatedJob]
    counts: ReliabilityCounts
    incidents_in_window: int
    ncns_in_recent_assignments: int
    recent_scores: List[float]


@dataclass
class WorkerSnapshot:
    """Complete derived scoring record for one worker.

    Overwritten in full on every recompute; never patched field by field.
    """
    worker_id: str
    performance_score: float = 0.0
    reliability_score: float = 0.0
    late_rate: float = 0.0
    ncns_rate: float = 0.0
    tier: Tier = Tier.CRITICAL
    flags: Tuple[Flag, ...] = ()

    total_jobs: int = 0
    completed_count: int = 0
    late_count: int = 0
    sent_home_count: int = 0
    ncns_count: int = 0
    completion_rate: float = 0.0
    sent_home_rate: float = 0.0
    last_30_day_score: float = 0.0
    category_metrics: List[CategoryMetric] = field(default_factory=list)
    flag_reasons: Dict[str, List[str]] = field(default_factory=dict)

    def has_flag(self, flag: Flag) -> bool:
        return flag in self.flags

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain JSON-compatible types."""
        data = asdict(self)
        data['tier'] = self.tier.value
        data['flags'] = [f.value for f in self.flags]
        data['category_metrics'] = [
            {**asdict(m), 'trend': m.trend.value} for m in self.category_metrics
        ]
        return data
