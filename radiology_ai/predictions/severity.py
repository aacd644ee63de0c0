"""
Severity tiers relative to the strongest prediction in a set.
"""

from dataclasses import dataclass
from enum import Enum

# Percent of the set maximum at which each tier starts
MODERATE_THRESHOLD_PCT = 33.0
SEVERE_THRESHOLD_PCT = 66.0


class Tier(str, Enum):
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


TIER_COLORS = {
    Tier.MILD: "green",
    Tier.MODERATE: "orange",
    Tier.SEVERE: "red",
}


@dataclass(frozen=True)
class SeverityThresholds:
    moderate_pct: float = MODERATE_THRESHOLD_PCT
    severe_pct: float = SEVERE_THRESHOLD_PCT


DEFAULT_THRESHOLDS = SeverityThresholds()


def relative_percent(mean: float, set_max: float) -> float:
    """``mean`` as a percentage of ``set_max``; 0.0 when there is no positive maximum."""
    if set_max <= 0:
        return 0.0
    return mean * 100.0 / set_max


def classify(mean: float, set_max: float, thresholds: SeverityThresholds = DEFAULT_THRESHOLDS) -> Tier:
    """
    Map a class mean to a severity tier.

    Tiers are half-open intervals of the relative percentage
    ``[0, moderate)``, ``[moderate, severe)`` and ``[severe, inf)``.
    A set whose maximum is 0 classifies every entry as mild.
    """
    if set_max <= 0:
        return Tier.MILD
    
    pct = relative_percent(mean, set_max)
    if pct < thresholds.moderate_pct:
        return Tier.MILD
    if pct < thresholds.severe_pct:
        return Tier.MODERATE
    return Tier.SEVERE


def tier_color(tier: Tier) -> str:
    return TIER_COLORS[tier]


def legend():
    """(tier, colour) pairs in display order, shared by rows and legend."""
    return [(tier, TIER_COLORS[tier]) for tier in Tier]
