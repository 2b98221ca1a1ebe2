"""Tests for the Pydantic data models -- ProjectContext, RiskLevel,
ReplyOption, and AnalysisResult.

All tests use real Pydantic validation.  No mocks, no stubs, no fakes.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scope_sentinel.models import (
    DEFAULT_CONTRACT_EXCERPT_CHARS,
    MAX_CONFIDENCE,
    AnalysisResult,
    ProjectContext,
    ReplyOption,
    ReplyType,
    RiskLevel,
)


def _replies() -> list[ReplyOption]:
    return [
        ReplyOption(type=ReplyType.POLITE_BOUNDARY, content="Happy to discuss."),
        ReplyOption(type=ReplyType.PAID_ADDON, content="I can send an estimate."),
        ReplyOption(type=ReplyType.NEGOTIATION_FRIENDLY, content="We could swap it."),
    ]


# ---------------------------------------------------------------------------
# ProjectContext
# ---------------------------------------------------------------------------


class TestProjectContext:
    def test_defaults(self) -> None:
        ctx = ProjectContext()
        assert ctx.scope_summary == ""
        assert ctx.out_of_scope_items is None
        assert ctx.contract_text is None

    def test_quick_context_is_empty(self) -> None:
        ctx = ProjectContext.quick()
        assert ctx.is_empty
        assert ctx == ProjectContext()

    def test_non_empty_context(self) -> None:
        assert not ProjectContext(scope_summary="Landing page").is_empty
        assert not ProjectContext(out_of_scope_items="Hosting").is_empty
        assert not ProjectContext(contract_text="Terms").is_empty

    def test_is_frozen(self) -> None:
        ctx = ProjectContext(scope_summary="Landing page")
        with pytest.raises(ValidationError):
            ctx.scope_summary = "Something else"

    def test_contract_excerpt_truncates(self) -> None:
        ctx = ProjectContext(contract_text="x" * 5000)
        assert len(ctx.contract_excerpt()) == DEFAULT_CONTRACT_EXCERPT_CHARS
        assert len(ctx.contract_excerpt(10)) == 10

    def test_contract_excerpt_short_text_unchanged(self) -> None:
        ctx = ProjectContext(contract_text="Short contract.")
        assert ctx.contract_excerpt() == "Short contract."

    def test_contract_excerpt_without_contract(self) -> None:
        assert ProjectContext().contract_excerpt() == ""


# ---------------------------------------------------------------------------
# RiskLevel
# ---------------------------------------------------------------------------


class TestRiskLevel:
    def test_exactly_three_tiers(self) -> None:
        assert len(list(RiskLevel)) == 3

    def test_rank_order(self) -> None:
        assert (
            RiskLevel.LIKELY_IN_SCOPE.rank
            < RiskLevel.POSSIBLY_SCOPE_CREEP.rank
            < RiskLevel.HIGH_RISK_SCOPE_CREEP.rank
        )

    def test_string_values(self) -> None:
        assert RiskLevel("HIGH_RISK_SCOPE_CREEP") is RiskLevel.HIGH_RISK_SCOPE_CREEP
        assert RiskLevel.LIKELY_IN_SCOPE == "LIKELY_IN_SCOPE"

    def test_labels(self) -> None:
        assert RiskLevel.LIKELY_IN_SCOPE.label == "Within Scope"
        assert RiskLevel.POSSIBLY_SCOPE_CREEP.label == "Potential Scope Creep"
        assert RiskLevel.HIGH_RISK_SCOPE_CREEP.label == "Likely Outside Scope"

    def test_unknown_value_rejected(self) -> None:
        with pytest.raises(ValueError):
            RiskLevel("MAYBE")


# ---------------------------------------------------------------------------
# ReplyOption
# ---------------------------------------------------------------------------


class TestReplyOption:
    def test_create(self) -> None:
        reply = ReplyOption(type=ReplyType.PAID_ADDON, content="Estimate to follow.")
        assert reply.type is ReplyType.PAID_ADDON
        assert reply.to_dict() == {"type": "PAID_ADDON", "content": "Estimate to follow."}

    def test_type_from_string(self) -> None:
        reply = ReplyOption(type="POLITE_BOUNDARY", content="Thanks!")
        assert reply.type is ReplyType.POLITE_BOUNDARY

    def test_empty_content_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReplyOption(type=ReplyType.PAID_ADDON, content="")

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReplyOption(type="SARCASTIC", content="Sure.")


# ---------------------------------------------------------------------------
# AnalysisResult
# ---------------------------------------------------------------------------


class TestAnalysisResult:
    def test_in_scope_without_replies(self) -> None:
        result = AnalysisResult(
            risk_level=RiskLevel.LIKELY_IN_SCOPE,
            confidence_score=30,
            reasoning="Looks fine.",
        )
        assert result.replies == []

    def test_in_scope_with_replies_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(
                risk_level=RiskLevel.LIKELY_IN_SCOPE,
                confidence_score=30,
                reasoning="Looks fine.",
                replies=_replies(),
            )

    def test_creep_with_replies(self) -> None:
        result = AnalysisResult(
            risk_level=RiskLevel.HIGH_RISK_SCOPE_CREEP,
            confidence_score=90,
            reasoning="New feature.",
            replies=_replies(),
        )
        assert [r.type for r in result.replies] == list(ReplyType)

    @pytest.mark.parametrize("confidence", [-1, MAX_CONFIDENCE + 1, 100])
    def test_confidence_out_of_range_rejected(self, confidence: int) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(
                risk_level=RiskLevel.POSSIBLY_SCOPE_CREEP,
                confidence_score=confidence,
                reasoning="Maybe.",
            )

    def test_empty_reasoning_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(
                risk_level=RiskLevel.POSSIBLY_SCOPE_CREEP,
                confidence_score=60,
                reasoning="",
            )

    def test_to_dict_camel_case_shape(self) -> None:
        result = AnalysisResult(
            risk_level=RiskLevel.POSSIBLY_SCOPE_CREEP,
            confidence_score=60,
            reasoning="Maybe.",
            replies=_replies()[:1],
        )
        assert result.to_dict() == {
            "riskLevel": "POSSIBLY_SCOPE_CREEP",
            "confidenceScore": 60,
            "reasoning": "Maybe.",
            "replies": [{"type": "POLITE_BOUNDARY", "content": "Happy to discuss."}],
        }
