"""Scope creep classification engine.

- :mod:`~scope_sentinel.engine.patterns` -- weighted signal library
- :mod:`~scope_sentinel.engine.overlap` -- scope vocabulary overlap matcher
- :mod:`~scope_sentinel.engine.scorer` -- bounded risk score
- :mod:`~scope_sentinel.engine.tiers` -- score to risk tier
- :mod:`~scope_sentinel.engine.explanation` / :mod:`~scope_sentinel.engine.replies`
  -- heuristic reasoning text and reply drafts
- :mod:`~scope_sentinel.engine.backend` / :mod:`~scope_sentinel.engine.normalize`
  -- external LLM classifier and output normalisation
- :mod:`~scope_sentinel.engine.analyzer` -- the orchestrator
- :mod:`~scope_sentinel.engine.client_risk` -- per-client risk aggregation
"""

from scope_sentinel.engine.analyzer import (
    BackendClassifier,
    Classifier,
    HeuristicClassifier,
    ScopeAnalyzer,
    analyze,
)
from scope_sentinel.engine.backend import ExternalClassifier, GroqClassifier, PromptContext
from scope_sentinel.engine.client_risk import RISK_POINTS, calculate_client_risk_score
from scope_sentinel.engine.explanation import confidence_descriptor, generate_reasoning
from scope_sentinel.engine.normalize import normalize_backend_result
from scope_sentinel.engine.overlap import overlap_adjustments, tokenize
from scope_sentinel.engine.patterns import (
    ALL_SIGNALS,
    IN_SCOPE_SIGNALS,
    SCOPE_CREEP_SIGNALS,
    Signal,
    match_signals,
)
from scope_sentinel.engine.replies import generate_replies
from scope_sentinel.engine.scorer import ScoreResult, calculate_risk_score
from scope_sentinel.engine.tiers import (
    HIGH_RISK_THRESHOLD,
    POSSIBLY_SCOPE_CREEP_THRESHOLD,
    classify_risk_level,
)

__all__ = [
    "ALL_SIGNALS",
    "BackendClassifier",
    "Classifier",
    "ExternalClassifier",
    "GroqClassifier",
    "HIGH_RISK_THRESHOLD",
    "HeuristicClassifier",
    "IN_SCOPE_SIGNALS",
    "POSSIBLY_SCOPE_CREEP_THRESHOLD",
    "PromptContext",
    "RISK_POINTS",
    "SCOPE_CREEP_SIGNALS",
    "ScopeAnalyzer",
    "ScoreResult",
    "Signal",
    "analyze",
    "calculate_client_risk_score",
    "calculate_risk_score",
    "classify_risk_level",
    "confidence_descriptor",
    "generate_reasoning",
    "generate_replies",
    "match_signals",
    "normalize_backend_result",
    "overlap_adjustments",
    "tokenize",
]
