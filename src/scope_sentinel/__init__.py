"""Scope Sentinel - scope creep risk classification for client messages."""

__version__ = "0.1.0"

from scope_sentinel.config import SentinelConfig
from scope_sentinel.engine.analyzer import ScopeAnalyzer, analyze
from scope_sentinel.models import AnalysisResult, ProjectContext, RiskLevel

__all__ = [
    "AnalysisResult",
    "ProjectContext",
    "RiskLevel",
    "ScopeAnalyzer",
    "SentinelConfig",
    "__version__",
    "analyze",
]
