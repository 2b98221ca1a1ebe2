"""Exception hierarchy for the scope classification engine.

Only :class:`InvalidMessageError` ever reaches callers of
:func:`scope_sentinel.engine.analyzer.analyze`.  :class:`BackendError` is
raised by external classifiers and normalisation, and is always absorbed by
the orchestrator, which falls back to the heuristic classifier.
"""

from __future__ import annotations


class ScopeSentinelError(Exception):
    """Base class for all scope-sentinel errors."""


class InvalidMessageError(ScopeSentinelError, ValueError):
    """The message to analyse is missing, not a string, or blank."""


class BackendError(ScopeSentinelError):
    """The external classification backend failed or returned unusable data."""
