"""Weighted textual signals used by the heuristic scope creep scorer.

Each :class:`Signal` pairs a case-insensitive regular expression with a
signed weight and a rationale shown to the user.  Scope creep indicators
push the score up; in-scope indicators pull it down.

The library is built once at import time and never mutated, so it can be
shared freely between concurrent analyses.  Order matters only for the
order of rationale strings in the explanation: every firing signal adds
its full weight exactly once, no matter how often it matches.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SIGNAL_GROUP_SCOPE_CREEP = "scope_creep"
SIGNAL_GROUP_IN_SCOPE = "in_scope"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Signal:
    """A single weighted pattern.

    Attributes:
        pattern: Compiled, case-insensitive regular expression.
        weight: Signed contribution to the risk score when the pattern fires.
        reason: Human-readable rationale appended to the explanation.
        group: Either 'scope_creep' or 'in_scope'.
    """

    pattern: re.Pattern
    weight: float
    reason: str
    group: str = SIGNAL_GROUP_SCOPE_CREEP

    def matches(self, message: str) -> bool:
        """Return True if the pattern occurs anywhere in *message*."""
        return self.pattern.search(message) is not None

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary."""
        return {
            "pattern": self.pattern.pattern,
            "weight": self.weight,
            "reason": self.reason,
            "group": self.group,
        }


def _creep(pattern: str, weight: float, reason: str) -> Signal:
    return Signal(re.compile(pattern, re.IGNORECASE), weight, reason, SIGNAL_GROUP_SCOPE_CREEP)


def _in_scope(pattern: str, weight: float, reason: str) -> Signal:
    return Signal(re.compile(pattern, re.IGNORECASE), weight, reason, SIGNAL_GROUP_IN_SCOPE)


# ---------------------------------------------------------------------------
# Signal library
# ---------------------------------------------------------------------------

SCOPE_CREEP_SIGNALS: tuple[Signal, ...] = (
    # Minimising and opportunistic language.
    _creep(r"just\s+(a\s+)?small", 0.3, 'Uses minimizing language ("just a small...")'),
    _creep(r"quick\s+(little\s+)?change", 0.35, 'Uses minimizing language ("quick change")'),
    _creep(r"shouldn'?t\s+take\s+(long|much)", 0.3, "Implies the work is trivial"),
    _creep(r"while\s+you'?re\s+at\s+it", 0.4, 'Adds work opportunistically ("while you\'re at it")'),
    _creep(r"can\s+you\s+also", 0.25, 'Requests additional work ("can you also")'),
    _creep(r"one\s+more\s+thing", 0.35, 'Adds scope incrementally ("one more thing")'),
    _creep(r"real\s+quick", 0.3, 'Minimizes effort with "real quick"'),
    _creep(r"simple\s+(tweak|change|fix)", 0.3, 'Uses "simple" to minimize perceived effort'),
    # Scope assumptions and pressure.
    _creep(r"thought\s+(it|this)\s+was\s+included", 0.4, "Assumes work was included in original scope"),
    _creep(r"didn'?t\s+we\s+(agree|discuss)", 0.35, "Questions original agreement"),
    _creep(r"before\s+(we\s+)?launch", 0.25, "Adds last-minute requirements before deadline"),
    _creep(r"urgent(ly)?", 0.2, "Uses urgency to pressure"),
    _creep(r"asap|as\s+soon\s+as\s+possible", 0.2, "Creates artificial urgency"),
    _creep(r"expected\s+this", 0.35, "Claims unmet expectations"),
    _creep(r"assumed\s+(this|it)", 0.35, "Makes assumptions about scope"),
    _creep(r"bonus|extra|additional", 0.2, "Requests additional features"),
    _creep(r"new\s+feature", 0.4, "Explicitly requests new feature"),
    _creep(r"add(ing)?\s+(a|some|new)", 0.3, "Requests additions to scope"),
    _creep(r"complete(ly)?\s+(different|new)", 0.45, "Requests significantly different work"),
    _creep(r"change\s+(the|our)\s+(direction|approach)", 0.5, "Major direction change requested"),
    # Revision abuse: site-wide changes, reversals, redesigns.
    _creep(r"all\s+pages?", 0.4, "Affects all pages (site-wide change)"),
    _creep(r"every\s+page", 0.4, "Affects every page (site-wide change)"),
    _creep(r"across\s+the\s+(site|website|app)", 0.4, "Site-wide change requested"),
    _creep(r"throughout\s+(the|all)", 0.35, "Global changes requested"),
    _creep(r"update\s+everything", 0.45, 'Broad "update everything" request'),
    _creep(r"apply\s+to\s+all", 0.4, "Applies changes globally"),
    _creep(r"global\s+(change|update)", 0.4, "Global changes requested"),
    _creep(r"changed\s+my\s+mind", 0.35, "Reversal of previously approved work"),
    _creep(r"redo\s+(the|this)", 0.4, "Requests to redo completed work"),
    _creep(r"start\s+over", 0.5, "Requests to start work over"),
    _creep(r"completely\s+redesign", 0.5, "Complete redesign request"),
    _creep(
        r"(fonts?|colors?|spacing|layout).*(and|,).*(fonts?|colors?|spacing|layout)",
        0.4,
        "Multiple design elements in one request",
    ),
    # Compliance, security, and infrastructure triggers.
    _creep(r"gdpr|ccpa|hipaa|compliance", 0.5, "Introduces compliance/regulatory requirements"),
    _creep(r"security\s+(audit|review|requirements?)", 0.45, "Introduces security requirements"),
    _creep(r"ssl|encryption|authentication", 0.4, "Introduces security/infrastructure work"),
    _creep(r"legal\s+(requirements?|review)", 0.45, "Introduces legal/regulatory expectations"),
    _creep(r"infrastructure|server|hosting|deployment", 0.4, "Involves infrastructure work"),
)

IN_SCOPE_SIGNALS: tuple[Signal, ...] = (
    _in_scope(r"bug|error|issue|broken|not\s+working", -0.2, "Reports a bug or issue"),
    _in_scope(r"as\s+(we\s+)?discussed", -0.15, "References previous discussion"),
    _in_scope(r"per\s+the\s+(scope|contract|agreement)", -0.3, "References agreed scope"),
    _in_scope(r"feedback|revision", -0.1, "Standard feedback request"),
    _in_scope(r"question\s+about", -0.15, "Asking for clarification"),
)

# Evaluation order: every scope creep indicator, then every in-scope indicator.
ALL_SIGNALS: tuple[Signal, ...] = SCOPE_CREEP_SIGNALS + IN_SCOPE_SIGNALS


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def match_signals(message: str) -> list[Signal]:
    """Return the signals that fire on *message*, in library order."""
    return [signal for signal in ALL_SIGNALS if signal.matches(message)]
