"""Tests for the heuristic explanation text and canned reply drafts."""

from __future__ import annotations

import pytest

from scope_sentinel.engine.explanation import (
    DISCLAIMER,
    TIER_INTRODUCTIONS,
    confidence_descriptor,
    generate_reasoning,
)
from scope_sentinel.engine.replies import CANNED_REPLIES, generate_replies
from scope_sentinel.models.result import ReplyType, RiskLevel


# ===========================================================================
# 1. Explanation text
# ===========================================================================


class TestGenerateReasoning:
    def test_full_layout(self) -> None:
        text = generate_reasoning(RiskLevel.LIKELY_IN_SCOPE, ["Reports a bug or issue"], 0.3)
        assert text == (
            "This request appears to be within the defined project scope.\n\n"
            "Key observations:\n"
            "- Reports a bug or issue\n\n"
            "Confidence level: low (30%)\n\n"
            "Note: This is an automated assessment. Please review the request "
            "carefully and use your professional judgment."
        )

    def test_no_reasons_omits_observations(self) -> None:
        text = generate_reasoning(RiskLevel.POSSIBLY_SCOPE_CREEP, [], 0.5)
        assert "Key observations" not in text
        assert text == (
            f"{TIER_INTRODUCTIONS[RiskLevel.POSSIBLY_SCOPE_CREEP]}\n\n"
            "Confidence level: low (50%)\n\n"
            f"{DISCLAIMER}"
        )

    def test_duplicates_preserved_in_order(self) -> None:
        text = generate_reasoning(
            RiskLevel.HIGH_RISK_SCOPE_CREEP,
            ["Global changes requested", "Site-wide change requested", "Global changes requested"],
            0.9,
        )
        assert (
            "- Global changes requested\n"
            "- Site-wide change requested\n"
            "- Global changes requested"
        ) in text
        assert "Confidence level: high (90%)" in text

    @pytest.mark.parametrize("risk_level", list(RiskLevel))
    def test_intro_per_tier(self, risk_level: RiskLevel) -> None:
        text = generate_reasoning(risk_level, [], 0.5)
        assert text.startswith(TIER_INTRODUCTIONS[risk_level])
        assert text.endswith(DISCLAIMER)

    def test_percentage_rounds_half_up(self) -> None:
        assert "(13%)" in generate_reasoning(RiskLevel.LIKELY_IN_SCOPE, [], 0.125)


class TestConfidenceDescriptor:
    @pytest.mark.parametrize(
        "score, expected",
        [(1.0, "high"), (0.81, "high"), (0.8, "moderate"), (0.51, "moderate"), (0.5, "low"), (0.0, "low")],
    )
    def test_descriptor(self, score: float, expected: str) -> None:
        assert confidence_descriptor(score) == expected


# ===========================================================================
# 2. Reply drafts
# ===========================================================================


class TestGenerateReplies:
    def test_in_scope_has_no_replies(self) -> None:
        assert generate_replies(RiskLevel.LIKELY_IN_SCOPE) == []

    @pytest.mark.parametrize(
        "risk_level", [RiskLevel.POSSIBLY_SCOPE_CREEP, RiskLevel.HIGH_RISK_SCOPE_CREEP]
    )
    def test_three_replies_in_fixed_order(self, risk_level: RiskLevel) -> None:
        replies = generate_replies(risk_level)
        assert [r.type for r in replies] == [
            ReplyType.POLITE_BOUNDARY,
            ReplyType.PAID_ADDON,
            ReplyType.NEGOTIATION_FRIENDLY,
        ]
        assert [r.content for r in replies] == [content for _, content in CANNED_REPLIES]

    def test_replies_identical_across_tiers(self) -> None:
        assert generate_replies(RiskLevel.POSSIBLY_SCOPE_CREEP) == generate_replies(
            RiskLevel.HIGH_RISK_SCOPE_CREEP
        )
