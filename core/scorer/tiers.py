#!/usr/bin/env python3
"""
Tier Mapping - Discrete reputation bucket from the performance score.
"""

from typing import Optional

from core.config_loader import TierThresholds
from core.scorer.models import Tier


def map_tier(score: float, thresholds: Optional[TierThresholds] = None) -> Tier:
    """Inclusive lower bounds, evaluated top-down; first match wins."""
    thresholds = thresholds or TierThresholds()

    if score >= thresholds.elite:
        return Tier.ELITE
    if score >= thresholds.strong:
        return Tier.STRONG
    if score >= thresholds.solid:
        return Tier.SOLID
    if score >= thresholds.at_risk:
        return Tier.AT_RISK
    return Tier.CRITICAL
