"""Pydantic data models for project context, risk tiers, replies, and results."""

from scope_sentinel.models.context import DEFAULT_CONTRACT_EXCERPT_CHARS, ProjectContext
from scope_sentinel.models.result import (
    MAX_CONFIDENCE,
    AnalysisResult,
    ReplyOption,
    ReplyType,
    RiskLevel,
)

__all__ = [
    "AnalysisResult",
    "DEFAULT_CONTRACT_EXCERPT_CHARS",
    "MAX_CONFIDENCE",
    "ProjectContext",
    "ReplyOption",
    "ReplyType",
    "RiskLevel",
]
