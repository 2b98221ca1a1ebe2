"""Result models shared by every classifier.

Both the heuristic classifier and any external backend produce an
:class:`AnalysisResult`.  Downstream consumers (CLI, MCP tools, callers that
persist analyses) depend only on this shape.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

# Highest confidence any classifier may report.
MAX_CONFIDENCE = 95


class RiskLevel(str, Enum):
    """Risk tier of a client message, ordered from safest to riskiest."""

    LIKELY_IN_SCOPE = "LIKELY_IN_SCOPE"
    POSSIBLY_SCOPE_CREEP = "POSSIBLY_SCOPE_CREEP"
    HIGH_RISK_SCOPE_CREEP = "HIGH_RISK_SCOPE_CREEP"

    @property
    def rank(self) -> int:
        """Position in the risk ordering (0 = in scope, 2 = high risk)."""
        return _RISK_RANK[self]

    @property
    def label(self) -> str:
        """Short human-readable label for display."""
        return _RISK_LABELS[self]


_RISK_RANK = {
    RiskLevel.LIKELY_IN_SCOPE: 0,
    RiskLevel.POSSIBLY_SCOPE_CREEP: 1,
    RiskLevel.HIGH_RISK_SCOPE_CREEP: 2,
}

_RISK_LABELS = {
    RiskLevel.LIKELY_IN_SCOPE: "Within Scope",
    RiskLevel.POSSIBLY_SCOPE_CREEP: "Potential Scope Creep",
    RiskLevel.HIGH_RISK_SCOPE_CREEP: "Likely Outside Scope",
}


class ReplyType(str, Enum):
    """Communication strategy of a reply draft."""

    POLITE_BOUNDARY = "POLITE_BOUNDARY"
    PAID_ADDON = "PAID_ADDON"
    NEGOTIATION_FRIENDLY = "NEGOTIATION_FRIENDLY"


class ReplyOption(BaseModel):
    """A reply draft the freelancer may send back to the client."""

    type: ReplyType = Field(..., description="Communication strategy of the reply.")
    content: str = Field(..., min_length=1, description="Reply text.")

    def to_dict(self) -> dict:
        return {"type": self.type.value, "content": self.content}


class AnalysisResult(BaseModel):
    """Verdict for one client message.

    The reply list is always empty for :attr:`RiskLevel.LIKELY_IN_SCOPE`.
    The heuristic classifier returns exactly three replies for every other
    tier; a backend may return fewer after malformed entries are dropped.
    """

    risk_level: RiskLevel = Field(..., description="Risk tier of the message.")
    confidence_score: int = Field(
        ...,
        ge=0,
        le=MAX_CONFIDENCE,
        description="Certainty in the assigned tier, as an integer percentage.",
    )
    reasoning: str = Field(
        ...,
        min_length=1,
        description="Human-readable explanation of the verdict.",
    )
    replies: list[ReplyOption] = Field(
        default_factory=list,
        description="Reply drafts, empty when the message is likely in scope.",
    )

    @model_validator(mode="after")
    def check_replies_for_tier(self) -> "AnalysisResult":
        """Reject reply drafts attached to an in-scope verdict."""
        if self.risk_level is RiskLevel.LIKELY_IN_SCOPE and self.replies:
            raise ValueError(
                "A LIKELY_IN_SCOPE result must not carry reply drafts."
            )
        return self

    def to_dict(self) -> dict:
        """Serialise to the camelCase shape exposed to callers."""
        return {
            "riskLevel": self.risk_level.value,
            "confidenceScore": self.confidence_score,
            "reasoning": self.reasoning,
            "replies": [reply.to_dict() for reply in self.replies],
        }
