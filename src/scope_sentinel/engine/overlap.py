"""Vocabulary overlap between a message and the project's scope text.

This is a coarse token-overlap heuristic, not semantic matching.  Words are
lower-cased and split on whitespace only (punctuation stays attached), and
message words of four characters or fewer are ignored to keep stopwords
out of the count.  Every occurrence of a qualifying message word counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from scope_sentinel.models.context import ProjectContext

# Message words must be longer than this to count.
MIN_WORD_LENGTH = 4

# Scope alignment: more than this many matches lowers the score.
SCOPE_MATCH_THRESHOLD = 3
SCOPE_MATCH_ADJUSTMENT = -0.15
SCOPE_MATCH_REASON = "Message content aligns with defined scope"

# Exclusion match: more than this many matches raises the score.
OUT_OF_SCOPE_MATCH_THRESHOLD = 2
OUT_OF_SCOPE_MATCH_ADJUSTMENT = 0.25
OUT_OF_SCOPE_MATCH_REASON = "Request appears to match explicitly out-of-scope items"


@dataclass(frozen=True)
class OverlapAdjustment:
    """A score adjustment triggered by vocabulary overlap."""

    delta: float
    reason: str
    match_count: int


def tokenize(text: str) -> list[str]:
    """Lower-case *text* and split it on runs of whitespace."""
    return text.lower().split()


def count_overlap(message_words: list[str], vocabulary: set[str]) -> int:
    """Count message words longer than MIN_WORD_LENGTH found in *vocabulary*."""
    return sum(
        1
        for word in message_words
        if len(word) > MIN_WORD_LENGTH and word in vocabulary
    )


def scope_alignment(message: str, scope_summary: str) -> Optional[OverlapAdjustment]:
    """Return the negative adjustment if the message echoes the scope summary."""
    count = count_overlap(tokenize(message), set(tokenize(scope_summary)))
    if count > SCOPE_MATCH_THRESHOLD:
        return OverlapAdjustment(SCOPE_MATCH_ADJUSTMENT, SCOPE_MATCH_REASON, count)
    return None


def exclusion_match(
    message: str, out_of_scope_items: Optional[str]
) -> Optional[OverlapAdjustment]:
    """Return the positive adjustment if the message echoes excluded items."""
    if not out_of_scope_items:
        return None
    count = count_overlap(tokenize(message), set(tokenize(out_of_scope_items)))
    if count > OUT_OF_SCOPE_MATCH_THRESHOLD:
        return OverlapAdjustment(
            OUT_OF_SCOPE_MATCH_ADJUSTMENT, OUT_OF_SCOPE_MATCH_REASON, count
        )
    return None


def overlap_adjustments(message: str, context: ProjectContext) -> list[OverlapAdjustment]:
    """Return the triggered adjustments: scope alignment first, then exclusions."""
    adjustments: list[OverlapAdjustment] = []
    aligned = scope_alignment(message, context.scope_summary)
    if aligned is not None:
        adjustments.append(aligned)
    excluded = exclusion_match(message, context.out_of_scope_items)
    if excluded is not None:
        adjustments.append(excluded)
    return adjustments
