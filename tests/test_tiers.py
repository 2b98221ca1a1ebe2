"""Tests for the tier classifier boundaries."""

from __future__ import annotations

import pytest

from scope_sentinel.engine.tiers import (
    HIGH_RISK_THRESHOLD,
    POSSIBLY_SCOPE_CREEP_THRESHOLD,
    classify_risk_level,
)
from scope_sentinel.models.result import RiskLevel


class TestBoundaries:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (0.0, RiskLevel.LIKELY_IN_SCOPE),
            (0.399, RiskLevel.LIKELY_IN_SCOPE),
            (0.40, RiskLevel.POSSIBLY_SCOPE_CREEP),
            (0.5, RiskLevel.POSSIBLY_SCOPE_CREEP),
            (0.649, RiskLevel.POSSIBLY_SCOPE_CREEP),
            (0.65, RiskLevel.HIGH_RISK_SCOPE_CREEP),
            (1.0, RiskLevel.HIGH_RISK_SCOPE_CREEP),
        ],
    )
    def test_tier_for_score(self, score: float, expected: RiskLevel) -> None:
        assert classify_risk_level(score) is expected

    def test_thresholds(self) -> None:
        assert POSSIBLY_SCOPE_CREEP_THRESHOLD == 0.40
        assert HIGH_RISK_THRESHOLD == 0.65

    def test_tiers_monotonic_over_unit_interval(self) -> None:
        ranks = [classify_risk_level(i / 1000).rank for i in range(1001)]
        assert ranks == sorted(ranks)
        assert set(ranks) == {0, 1, 2}
