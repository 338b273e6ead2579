# Name: scoring.py
# Description: Risk band mapping for LLM-assigned risk scores
# Date: 2026-10-12
#
# The LLM is the scorer; this module only clamps its number and projects
# it onto the four categorical risk bands.

from cybersentry.models.analysis import RiskLevel


# =============================================================================
# SCORE RANGE
# =============================================================================

MIN_RISK_SCORE = 1
MAX_RISK_SCORE = 10
DEFAULT_RISK_SCORE = 5


def clamp_score(score: int) -> int:
    """
    Clamp a raw score into the valid 1-10 range.
    
    Examples:
        >>> clamp_score(99)
        10
        >>> clamp_score(0)
        1
    """
    return max(MIN_RISK_SCORE, min(MAX_RISK_SCORE, score))


# =============================================================================
# RISK LEVEL CLASSIFICATION
# =============================================================================

# Inclusive upper bound of each band, checked in order
RISK_BANDS: tuple[tuple[int, RiskLevel], ...] = (
    (2, "LOW"),
    (5, "MEDIUM"),
    (7, "HIGH"),
)


def determine_risk_level(score: int) -> RiskLevel:
    """
    Classify a numeric risk score into a categorical risk level.
    
    Thresholds:
        - score <= 2   → "LOW"
        - score <= 5   → "MEDIUM"
        - score <= 7   → "HIGH"
        - otherwise    → "CRITICAL"
    
    Args:
        score: Numeric risk score (expected range: 1 - 10)
        
    Returns:
        Risk level string
    
    Examples:
        >>> determine_risk_level(2)
        'LOW'
        >>> determine_risk_level(6)
        'HIGH'
        >>> determine_risk_level(8)
        'CRITICAL'
    """
    for upper, level in RISK_BANDS:
        if score <= upper:
            return level
    return "CRITICAL"
