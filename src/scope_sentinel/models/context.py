"""ProjectContext model -- the per-call project data a message is judged against.

A context is built fresh for every analysis from whatever project data the
caller holds.  When no project is linked to the message (a "quick"
analysis), an empty context is used instead.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Number of contract characters forwarded to an external classifier.
DEFAULT_CONTRACT_EXCERPT_CHARS = 2000


class ProjectContext(BaseModel):
    """Immutable description of a project's agreed scope."""

    model_config = ConfigDict(frozen=True)

    scope_summary: str = Field(
        default="",
        description="Free text describing the work included in the project.",
    )
    out_of_scope_items: Optional[str] = Field(
        default=None,
        description="Free text listing work explicitly excluded from the project.",
    )
    contract_text: Optional[str] = Field(
        default=None,
        description="Contract text, truncated before being sent to a backend.",
    )

    @classmethod
    def quick(cls) -> "ProjectContext":
        """Return the empty context used when no project is linked."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.scope_summary or self.out_of_scope_items or self.contract_text)

    def contract_excerpt(self, limit: int = DEFAULT_CONTRACT_EXCERPT_CHARS) -> str:
        """Return the first *limit* characters of the contract text ('' if absent)."""
        if not self.contract_text:
            return ""
        return self.contract_text[: max(0, limit)]
