"""Normalisation of untrusted external classifier output.

Every field of a backend payload is treated as untrusted and decoded with
an explicit fallback:

- ``riskLevel``: must be one of the three tier names; anything else becomes
  ``POSSIBLY_SCOPE_CREEP`` (never either extreme).
- ``confidenceScore``: leading integer of a number or numeric string,
  defaulting to 65 when missing or unparseable, then clamped to [50, 95].
- ``reasoning``: non-empty string, otherwise a fixed placeholder.
- ``replies``: forced empty for in-scope verdicts; otherwise only entries
  with a known type and non-empty content survive, in their original
  order.  The list is not padded to three.

Only a payload that is not a mapping at all is rejected with
:class:`BackendError`.  Running an already normalised result (via
:meth:`AnalysisResult.to_dict`) through :func:`normalize_backend_result`
again yields the same result.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any, Optional

from scope_sentinel.errors import BackendError
from scope_sentinel.models.result import (
    MAX_CONFIDENCE,
    AnalysisResult,
    ReplyOption,
    ReplyType,
    RiskLevel,
)

logger = logging.getLogger(__name__)

FALLBACK_RISK_LEVEL = RiskLevel.POSSIBLY_SCOPE_CREEP
DEFAULT_BACKEND_CONFIDENCE = 65
MIN_BACKEND_CONFIDENCE = 50
MAX_BACKEND_CONFIDENCE = MAX_CONFIDENCE
FALLBACK_REASONING = "Unable to generate detailed reasoning."

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_VALID_RISK_LEVELS = {level.value: level for level in RiskLevel}
_VALID_REPLY_TYPES = {reply_type.value: reply_type for reply_type in ReplyType}


def normalize_risk_level(value: Any) -> RiskLevel:
    """Decode a tier name, falling back to the middle tier."""
    if isinstance(value, RiskLevel):
        return value
    if isinstance(value, str) and value in _VALID_RISK_LEVELS:
        return _VALID_RISK_LEVELS[value]
    logger.debug("Unrecognised risk level %r; using %s.", value, FALLBACK_RISK_LEVEL.value)
    return FALLBACK_RISK_LEVEL


def _parse_confidence(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return None


def normalize_confidence(value: Any) -> int:
    """Decode a confidence value and clamp it to the backend range."""
    parsed = _parse_confidence(value)
    if parsed is None:
        parsed = DEFAULT_BACKEND_CONFIDENCE
    return max(MIN_BACKEND_CONFIDENCE, min(MAX_BACKEND_CONFIDENCE, parsed))


def normalize_reasoning(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return FALLBACK_REASONING


def normalize_replies(value: Any, risk_level: RiskLevel) -> list[ReplyOption]:
    """Keep only well-formed reply entries, in order."""
    if risk_level is RiskLevel.LIKELY_IN_SCOPE:
        return []
    if not isinstance(value, (list, tuple)):
        return []

    replies: list[ReplyOption] = []
    for entry in value:
        if isinstance(entry, ReplyOption):
            replies.append(entry)
            continue
        if not isinstance(entry, Mapping):
            continue
        reply_type = entry.get("type")
        if isinstance(reply_type, ReplyType):
            reply_type = reply_type.value
        if not isinstance(reply_type, str) or reply_type not in _VALID_REPLY_TYPES:
            continue
        content = entry.get("content")
        if content is None:
            continue
        content = str(content).strip()
        if not content:
            continue
        replies.append(ReplyOption(type=_VALID_REPLY_TYPES[reply_type], content=content))

    dropped = len(value) - len(replies)
    if dropped:
        logger.debug("Dropped %d malformed reply entries from backend output.", dropped)
    return replies


def normalize_backend_result(raw: Any) -> AnalysisResult:
    """Decode a raw backend payload into an :class:`AnalysisResult`.

    Raises
    ------
    BackendError
        If *raw* is not a mapping.
    """
    if not isinstance(raw, Mapping):
        raise BackendError(
            f"Backend returned a {type(raw).__name__}, expected a JSON object."
        )

    risk_level = normalize_risk_level(raw.get("riskLevel"))
    return AnalysisResult(
        risk_level=risk_level,
        confidence_score=normalize_confidence(raw.get("confidenceScore")),
        reasoning=normalize_reasoning(raw.get("reasoning")),
        replies=normalize_replies(raw.get("replies"), risk_level),
    )
