"""Analysis orchestrator -- the public entry point of the engine.

Two implementations share the :class:`Classifier` interface:

- :class:`HeuristicClassifier` -- pattern scoring, tier mapping, canned
  explanation and replies.  Infallible for any valid message.
- :class:`BackendClassifier` -- delegates to an
  :class:`~scope_sentinel.engine.backend.ExternalClassifier` and normalises
  its untrusted output.

:class:`ScopeAnalyzer` tries the backend first when one is configured and
falls back to the heuristic classifier on any failure.  The only error a
caller can observe is :class:`InvalidMessageError` for a missing or blank
message.

Typical usage::

    from scope_sentinel import ProjectContext, analyze

    result = analyze(
        "Can you also add a blog section?",
        ProjectContext(scope_summary="Five page marketing website"),
    )
    print(result.risk_level, result.confidence_score)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from scope_sentinel.config import SentinelConfig
from scope_sentinel.engine.backend import ExternalClassifier, GroqClassifier, PromptContext
from scope_sentinel.engine.explanation import generate_reasoning
from scope_sentinel.engine.normalize import normalize_backend_result
from scope_sentinel.engine.replies import generate_replies
from scope_sentinel.engine.scorer import calculate_risk_score
from scope_sentinel.engine.tiers import classify_risk_level
from scope_sentinel.errors import InvalidMessageError
from scope_sentinel.models.context import DEFAULT_CONTRACT_EXCERPT_CHARS, ProjectContext
from scope_sentinel.models.result import MAX_CONFIDENCE, AnalysisResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Classifier strategies
# ---------------------------------------------------------------------------


class Classifier(ABC):
    """Strategy interface: classify one message against one project context."""

    name = "classifier"

    @abstractmethod
    def classify(self, message: str, context: ProjectContext) -> AnalysisResult:
        """Return the verdict for *message*."""

    def close(self) -> None:
        """Release any resources held by the classifier."""


class HeuristicClassifier(Classifier):
    """Pattern-weighted classifier used standalone or as the fallback."""

    name = "heuristic"

    def classify(self, message: str, context: ProjectContext) -> AnalysisResult:
        result = calculate_risk_score(message, context)
        risk_level = classify_risk_level(result.score)

        logger.debug(
            "Heuristic verdict %s (score=%.3f, raw=%.3f, signals=%d).",
            risk_level.value,
            result.score,
            result.raw_score,
            len(result.reasons),
        )

        return AnalysisResult(
            risk_level=risk_level,
            confidence_score=min(MAX_CONFIDENCE, result.percent),
            reasoning=generate_reasoning(risk_level, result.reasons, result.score),
            replies=generate_replies(risk_level),
        )


class BackendClassifier(Classifier):
    """Adapts an :class:`ExternalClassifier` to the :class:`Classifier` interface.

    Raises whatever the backend raises; normalisation repairs invalid
    fields but rejects non-object payloads with ``BackendError``.
    """

    name = "backend"

    def __init__(
        self,
        backend: ExternalClassifier,
        contract_excerpt_chars: int = DEFAULT_CONTRACT_EXCERPT_CHARS,
    ) -> None:
        self.backend = backend
        self.contract_excerpt_chars = contract_excerpt_chars

    def classify(self, message: str, context: ProjectContext) -> AnalysisResult:
        prompt = PromptContext.build(message, context, self.contract_excerpt_chars)
        raw = self.backend.classify(prompt)
        return normalize_backend_result(raw)

    def close(self) -> None:
        self.backend.close()


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ScopeAnalyzer:
    """Chooses between the backend and heuristic classifiers.

    Parameters
    ----------
    backend:
        Optional backend classifier tried before the heuristic one.  Either
        a :class:`Classifier` or a raw :class:`ExternalClassifier` (which is
        wrapped in a :class:`BackendClassifier`).
    heuristic:
        The fallback classifier.  Defaults to :class:`HeuristicClassifier`.
    """

    def __init__(
        self,
        backend: Optional[Any] = None,
        heuristic: Optional[Classifier] = None,
        contract_excerpt_chars: int = DEFAULT_CONTRACT_EXCERPT_CHARS,
    ) -> None:
        if isinstance(backend, ExternalClassifier):
            backend = BackendClassifier(backend, contract_excerpt_chars)
        self._backend: Optional[Classifier] = backend
        self._heuristic = heuristic or HeuristicClassifier()

    @classmethod
    def from_config(cls, config: SentinelConfig) -> "ScopeAnalyzer":
        """Build an analyzer, attaching the Groq backend only if configured."""
        backend = None
        if config.backend_configured:
            backend = GroqClassifier.from_config(config)
            logger.debug(
                "Backend classifier enabled: %s (%s).",
                config.backend_model,
                config.backend_base_url,
            )
        return cls(backend=backend, contract_excerpt_chars=config.contract_excerpt_chars)

    @property
    def backend(self) -> Optional[Classifier]:
        return self._backend

    @property
    def has_backend(self) -> bool:
        return self._backend is not None

    def close(self) -> None:
        """Close the backend classifier, if any."""
        if self._backend is not None:
            self._backend.close()

    def __enter__(self) -> "ScopeAnalyzer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def analyze(
        self,
        message: Any,
        context: Optional[ProjectContext] = None,
        use_backend: bool = True,
    ) -> AnalysisResult:
        """Classify *message* against *context*.

        Parameters
        ----------
        message:
            The client message.  Must be a non-blank string.
        context:
            Project scope data.  Defaults to :meth:`ProjectContext.quick`.
        use_backend:
            Set to *False* to skip the backend for this call.

        Raises
        ------
        InvalidMessageError
            If *message* is not a string or is blank.
        """
        _validate_message(message)
        if context is None:
            context = ProjectContext.quick()

        if use_backend and self._backend is not None:
            try:
                return self._backend.classify(message, context)
            except Exception:
                logger.warning(
                    "Backend classifier %r failed. Falling back to heuristic analysis.",
                    getattr(self._backend, "name", type(self._backend).__name__),
                    exc_info=True,
                )

        return self._heuristic.classify(message, context)


def _validate_message(message: Any) -> None:
    if not isinstance(message, str):
        raise InvalidMessageError(
            f"Message must be a string, got {type(message).__name__}."
        )
    if not message.strip():
        raise InvalidMessageError("Message is required.")


def analyze(
    message: Any,
    context: Optional[ProjectContext] = None,
    config: Optional[SentinelConfig] = None,
) -> AnalysisResult:
    """Analyse one message with an analyzer built from *config*.

    When *config* is None, :meth:`SentinelConfig.load` resolves it from the
    environment and the project's config file.  The message is validated
    before any configuration is read, and the analyzer is closed afterwards.
    """
    _validate_message(message)
    if config is None:
        config = SentinelConfig.load()
    with ScopeAnalyzer.from_config(config) as analyzer:
        return analyzer.analyze(message, context)
