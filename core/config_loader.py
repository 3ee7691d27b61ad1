import yaml
import os
from typing import Dict, Optional
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str
    echo: bool = False


class RatingWeights(BaseModel):
    """Blend used for an assignment's combined rating."""
    customer: float = 0.65
    staff: float = 0.35


class IncidentPenalties(BaseModel):
    """Per-event penalty applied to the reliability score (normalised by total jobs)."""
    late: float = -0.3
    sent_home: float = -0.7
    ncns: float = -1.5


class TierThresholds(BaseModel):
    """Inclusive lower bounds on performance score, evaluated top-down."""
    elite: float = 4.5
    strong: float = 4.0
    solid: float = 3.5
    at_risk: float = 3.0


class NeedsReviewPolicy(BaseModel):
    max_performance_score: float = 3.5  # flag when score is strictly below
    max_ncns_rate: float = 0.15  # flag when rate is strictly above
    incident_window_days: int = 30
    max_recent_incidents: int = 3  # flag when count is at or above
    trend_length: int = 5


class TerminatePolicy(BaseModel):
    max_ncns_rate: float = 0.25
    recent_assignment_window: int = 5
    max_recent_ncns: int = 2
    min_performance_score: float = 3.0
    min_jobs_for_performance: int = 10


class WorkerStatusPolicy(BaseModel):
    """Thresholds for the coarse staffing status shown to staff."""
    high_risk_ncns_rate: float = 0.15
    high_risk_late_rate: float = 0.2
    high_risk_reliability: float = 3.8
    high_risk_performance: float = 3.5
    strong_performance: float = 4.2


class ScorerConfig(BaseModel):
    """
    Configuration for the ScoringService.

    Every weight, penalty and threshold the engine uses lives here so a
    deployment can tune policy without touching code.
    """
    rating_weights: RatingWeights = Field(default_factory=RatingWeights)
    incident_penalties: IncidentPenalties = Field(default_factory=IncidentPenalties)
    max_score: float = 5.0
    tiers: TierThresholds = Field(default_factory=TierThresholds)
    needs_review: NeedsReviewPolicy = Field(default_factory=NeedsReviewPolicy)
    terminate: TerminatePolicy = Field(default_factory=TerminatePolicy)
    status: WorkerStatusPolicy = Field(default_factory=WorkerStatusPolicy)

    # Trailing window for the "last 30 days" score shown on profiles
    recent_score_window_days: int = 30


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class AppConfig(BaseModel):
    database: DatabaseConfig
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    logging: Optional[LoggingConfig] = LoggingConfig()
    extras: Dict[str, str] = Field(default_factory=dict)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from a subdirectory), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        if 'database' not in data or data['database'] is None:
            data['database'] = {}
        data['database']['url'] = env_db_url

    # Allow env var override for log level
    env_log_level = os.environ.get("LOG_LEVEL")
    if env_log_level:
        if 'logging' not in data or data['logging'] is None:
            data['logging'] = {}
        data['logging']['level'] = env_log_level.upper()

    return AppConfig(**data)
