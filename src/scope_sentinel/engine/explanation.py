"""Plain-text explanation of a heuristic verdict.

The text has up to four paragraphs separated by blank lines: a tier
introduction, the key observations (omitted when there are none), a
confidence line, and a fixed disclaimer.
"""

from __future__ import annotations

from scope_sentinel.engine.scorer import round_half_up
from scope_sentinel.models.result import RiskLevel

TIER_INTRODUCTIONS = {
    RiskLevel.LIKELY_IN_SCOPE: (
        "This request appears to be within the defined project scope."
    ),
    RiskLevel.POSSIBLY_SCOPE_CREEP: (
        "This request may extend beyond the original project scope."
    ),
    RiskLevel.HIGH_RISK_SCOPE_CREEP: (
        "This request likely represents scope creep and may require "
        "additional discussion."
    ),
}

DISCLAIMER = (
    "Note: This is an automated assessment. Please review the request "
    "carefully and use your professional judgment."
)

OBSERVATIONS_HEADING = "Key observations:"


def confidence_descriptor(score: float) -> str:
    """Return 'high', 'moderate', or 'low' for *score*."""
    if score > 0.8:
        return "high"
    if score > 0.5:
        return "moderate"
    return "low"


def generate_reasoning(risk_level: RiskLevel, reasons: list[str], score: float) -> str:
    """Render the explanation for a verdict.

    Reasons are listed in the order given, duplicates included.
    """
    sections = [TIER_INTRODUCTIONS[risk_level]]

    if reasons:
        bullets = "\n".join(f"- {reason}" for reason in reasons)
        sections.append(f"{OBSERVATIONS_HEADING}\n{bullets}")

    sections.append(
        f"Confidence level: {confidence_descriptor(score)} "
        f"({round_half_up(score * 100)}%)"
    )
    sections.append(DISCLAIMER)

    return "\n\n".join(sections)
