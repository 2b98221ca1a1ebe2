"""Mapping from a clamped risk score to a discrete risk tier."""

from __future__ import annotations

from scope_sentinel.models.result import RiskLevel

# Lower bounds (inclusive) of the two upper tiers.
POSSIBLY_SCOPE_CREEP_THRESHOLD = 0.40
HIGH_RISK_THRESHOLD = 0.65


def classify_risk_level(score: float) -> RiskLevel:
    """Return the tier for *score*.  Boundary values belong to the higher tier."""
    if score < POSSIBLY_SCOPE_CREEP_THRESHOLD:
        return RiskLevel.LIKELY_IN_SCOPE
    if score < HIGH_RISK_THRESHOLD:
        return RiskLevel.POSSIBLY_SCOPE_CREEP
    return RiskLevel.HIGH_RISK_SCOPE_CREEP
