"""Risk score computation for the heuristic classifier.

Starts from a neutral base score, adds the weight of every firing signal,
applies the scope overlap adjustments, and clamps the result to [0, 1].
No randomness, no I/O: the same message and context always produce the
same :class:`ScoreResult`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from scope_sentinel.engine.overlap import overlap_adjustments
from scope_sentinel.engine.patterns import match_signals
from scope_sentinel.models.context import ProjectContext

BASE_SCORE = 0.5
MIN_SCORE = 0.0
MAX_SCORE = 1.0


@dataclass
class ScoreResult:
    """Bounded risk probability plus the rationale that produced it.

    Attributes:
        score: Clamped score in [0.0, 1.0].
        reasons: Rationale strings in firing order.  Signal rationales come
            first (library order), then overlap adjustments.
        raw_score: The unclamped sum, kept for diagnostics.
    """

    score: float
    reasons: list[str] = field(default_factory=list)
    raw_score: float = BASE_SCORE

    @property
    def percent(self) -> int:
        """The score as a rounded integer percentage."""
        return round_half_up(self.score * 100)

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "raw_score": round(self.raw_score, 3),
            "reasons": list(self.reasons),
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def clamp_score(score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def calculate_risk_score(message: str, context: ProjectContext) -> ScoreResult:
    """Score *message* against *context*.

    Parameters
    ----------
    message:
        The raw client message.
    context:
        Project scope data.  An empty context disables both overlap
        adjustments.

    Returns
    -------
    ScoreResult
        The clamped score and the ordered rationale list.
    """
    score = BASE_SCORE
    reasons: list[str] = []

    for signal in match_signals(message):
        score += signal.weight
        reasons.append(signal.reason)

    for adjustment in overlap_adjustments(message, context):
        score += adjustment.delta
        reasons.append(adjustment.reason)

    return ScoreResult(score=clamp_score(score), reasons=reasons, raw_score=score)
