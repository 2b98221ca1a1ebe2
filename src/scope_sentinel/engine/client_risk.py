"""Client risk score aggregated over a project's analysed messages.

Each stored verdict is worth a fixed number of points by tier.  The client
score is the mean points per message scaled by three and capped at 100, so
a client whose every message is high risk scores 90 and a client with only
in-scope messages scores 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Union

from scope_sentinel.engine.scorer import round_half_up
from scope_sentinel.models.result import RiskLevel

RISK_POINTS = {
    RiskLevel.LIKELY_IN_SCOPE: 0,
    RiskLevel.POSSIBLY_SCOPE_CREEP: 15,
    RiskLevel.HIGH_RISK_SCOPE_CREEP: 30,
}

CLIENT_RISK_MULTIPLIER = 3
MAX_CLIENT_RISK_SCORE = 100


def risk_points(risk_level: Union[RiskLevel, str]) -> int:
    """Points for one verdict.  Unknown tier names are worth nothing."""
    try:
        return RISK_POINTS[RiskLevel(risk_level)]
    except ValueError:
        return 0


def calculate_client_risk_score(risk_levels: Iterable[Union[RiskLevel, str]]) -> int:
    """Return the 0-100 client risk score for a history of verdicts."""
    levels = list(risk_levels)
    total = sum(risk_points(level) for level in levels)
    average = total / max(1, len(levels))
    return min(MAX_CLIENT_RISK_SCORE, round_half_up(average * CLIENT_RISK_MULTIPLIER))
