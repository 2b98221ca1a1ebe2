"""Canned reply drafts for the heuristic classifier.

Replies depend only on the tier, not on which signals fired.
"""

from __future__ import annotations

from scope_sentinel.models.result import ReplyOption, ReplyType, RiskLevel

CANNED_REPLIES: tuple[tuple[ReplyType, str], ...] = (
    (
        ReplyType.POLITE_BOUNDARY,
        "Thanks for the suggestion! This isn't included in the original "
        "scope, but I'd be happy to discuss adding it.",
    ),
    (
        ReplyType.PAID_ADDON,
        "This would be an additional feature outside the current scope. "
        "I can share a quick estimate if you'd like to proceed.",
    ),
    (
        ReplyType.NEGOTIATION_FRIENDLY,
        "We can include this as a paid add-on or adjust the timeline. "
        "Let me know what works best for you.",
    ),
)


def generate_replies(risk_level: RiskLevel) -> list[ReplyOption]:
    """Return no replies for in-scope messages, otherwise one of each type."""
    if risk_level is RiskLevel.LIKELY_IN_SCOPE:
        return []
    return [ReplyOption(type=reply_type, content=content) for reply_type, content in CANNED_REPLIES]
