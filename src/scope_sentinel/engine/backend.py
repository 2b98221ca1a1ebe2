"""External LLM classifier for scope creep analysis.

The backend is an OpenAI-compatible chat-completions endpoint (Groq by
default) asked to return a JSON verdict.  Every failure mode -- transport
errors, timeouts, HTTP error statuses, empty completions, invalid JSON, or
a non-object payload -- is raised as :class:`BackendError`.  The analyzer
catches it and falls back to the heuristic classifier; callers never see it.

The raw payload returned by :meth:`ExternalClassifier.classify` is
untrusted.  It is decoded by
:func:`scope_sentinel.engine.normalize.normalize_backend_result`.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import requests

from scope_sentinel.config import SentinelConfig
from scope_sentinel.errors import BackendError
from scope_sentinel.models.context import DEFAULT_CONTRACT_EXCERPT_CHARS, ProjectContext

logger = logging.getLogger(__name__)

# HTTP statuses worth one more attempt.
_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})

SYSTEM_PROMPT = """You are a senior project manager and client communication expert who helps freelancers and agencies identify scope creep risk in client messages.

Your job is NOT to give legal advice.
Your job is to assess risk, explain reasoning clearly, and help the user respond professionally while preserving the client relationship.

You will be given:
1. Project scope summary
2. Explicit out-of-scope items (if provided)
3. Contract text (if provided)
4. A client message to analyze

IMPORTANT RULES:
- Never claim legal certainty
- Never say "this violates the contract"
- Never sound aggressive or accusatory
- Always use probability language ("likely", "appears to", "may be")
- Always prioritize calm, professional, relationship-safe communication

CLASSIFICATION LABELS (use ONLY these):
1. LIKELY_IN_SCOPE (displays as "Within Scope")
2. POSSIBLY_SCOPE_CREEP (displays as "Potential Scope Creep")
3. HIGH_RISK_SCOPE_CREEP (displays as "Likely Outside Scope")

CLASSIFICATION RULES:
Classify as "LIKELY_IN_SCOPE" if:
- The request clearly matches listed scope items
- It is a bug fix or clarification of included work
- It stays within defined revision limits
- It is a single, specific revision on ONE element

Classify as "POSSIBLY_SCOPE_CREEP" if:
- The request expands work in a subtle or ambiguous way
- It affects many elements or all pages (site-wide changes)
- It may exceed revision limits
- It proposes a scope trade-off (e.g., swapping features)
- It involves judgment or negotiation
- It requests to redo work that was already approved
- It uses minimizing language ("just a small thing", "quick change")

Classify as "HIGH_RISK_SCOPE_CREEP" if:
- It adds a new page, feature, or deliverable not in scope
- It involves third-party integrations
- It involves analytics, tracking, CRM, or backend work
- It is explicitly listed as out-of-scope
- It requests multiple design elements changed globally
- It requests a complete redesign

CONFIDENCE SCORE RULES:
- Never output 100% confidence
- Maximum confidence allowed is 95%
- Use these ranges:
  - Medium: 50-65%
  - High: 70-85%
  - Very High: 85-95%

EXPLANATION RULES:
- Explanation must be 2-4 sentences
- Reference the project scope or exclusions when relevant
- Clearly explain WHY the request is risky or safe
- Avoid legal or threatening language
- Keep tone neutral and professional

REPLY GENERATION RULES:
Generate exactly THREE replies (only if risk is not "LIKELY_IN_SCOPE"):

1. POLITE_BOUNDARY
   - Friendly, short, non-confrontational
2. PAID_ADDON
   - Clearly states extra work, mentions estimate or follow-up
   - No pressure
3. NEGOTIATION_FRIENDLY
   - Offers alternatives, suggests trade-offs or timeline discussion
   - Keeps relationship positive

Replies must be:
- Copy-paste ready (short, 1-2 sentences)
- Natural, not robotic
- NEVER use phrases like "per contract", "as agreed legally", "this violates"

OUTPUT FORMAT (JSON ONLY):
{
  "riskLevel": "LIKELY_IN_SCOPE" | "POSSIBLY_SCOPE_CREEP" | "HIGH_RISK_SCOPE_CREEP",
  "confidenceScore": <number 50-95>,
  "reasoning": "<2-4 sentence explanation>",
  "replies": [
    { "type": "POLITE_BOUNDARY", "content": "<reply>" },
    { "type": "PAID_ADDON", "content": "<reply>" },
    { "type": "NEGOTIATION_FRIENDLY", "content": "<reply>" }
  ]
}

If riskLevel is "LIKELY_IN_SCOPE", set replies to an empty array []."""


# ---------------------------------------------------------------------------
# Prompt context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PromptContext:
    """Everything an external classifier sees about one analysis."""

    message: str
    scope_summary: str = ""
    out_of_scope_items: str = ""
    contract_excerpt: str = ""

    @classmethod
    def build(
        cls,
        message: str,
        context: ProjectContext,
        contract_excerpt_chars: int = DEFAULT_CONTRACT_EXCERPT_CHARS,
    ) -> "PromptContext":
        return cls(
            message=message,
            scope_summary=context.scope_summary,
            out_of_scope_items=context.out_of_scope_items or "",
            contract_excerpt=context.contract_excerpt(contract_excerpt_chars),
        )

    def to_user_prompt(self) -> str:
        """Render the user prompt sent alongside :data:`SYSTEM_PROMPT`."""
        out_of_scope = (
            f"OUT OF SCOPE ITEMS:\n{self.out_of_scope_items}\n"
            if self.out_of_scope_items
            else ""
        )
        contract = (
            f"CONTRACT CONTEXT:\n{self.contract_excerpt}...\n"
            if self.contract_excerpt
            else ""
        )
        return (
            f"PROJECT SCOPE:\n{self.scope_summary}\n\n"
            f"{out_of_scope}\n"
            f"{contract}\n"
            f"CLIENT MESSAGE TO ANALYZE:\n\"{self.message}\"\n\n"
            "Analyze this message for scope creep risk and provide your "
            "assessment in the specified JSON format."
        )


# ---------------------------------------------------------------------------
# Classifier capability
# ---------------------------------------------------------------------------


class ExternalClassifier(ABC):
    """Capability interface for model-backed classifiers.

    Subclasses implement :meth:`classify`, returning the decoded JSON
    payload or raising :class:`BackendError`.
    """

    name = "external"

    @abstractmethod
    def classify(self, prompt: PromptContext) -> Any:
        """Return the raw verdict payload for *prompt*."""

    def close(self) -> None:
        """Release any resources held by the classifier."""


class GroqClassifier(ExternalClassifier):
    """Chat-completions classifier for Groq or any OpenAI-compatible API.

    Parameters
    ----------
    api_key:
        Bearer token for the API.
    base_url:
        API base URL, without the ``/chat/completions`` suffix.
    model:
        Chat model name.
    timeout:
        Request timeout in seconds.  Expiry is a backend failure.
    max_retries:
        Extra attempts after a transport failure or retryable status.
    session:
        Optional ``requests.Session`` (or compatible object exposing
        ``post``).  When omitted, a new session is created and
        :meth:`close` closes it; a supplied session is left open.
    """

    name = "groq"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        model: str = "llama-3.3-70b-versatile",
        timeout: float = 20.0,
        max_retries: int = 0,
        temperature: float = 0.3,
        max_tokens: int = 1500,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("GroqClassifier requires an API key.")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_config(
        cls,
        config: SentinelConfig,
        session: Optional[requests.Session] = None,
    ) -> "GroqClassifier":
        return cls(
            api_key=config.backend_api_key or "",
            base_url=config.backend_base_url,
            model=config.backend_model,
            timeout=config.backend_timeout_seconds,
            max_retries=config.backend_max_retries,
            temperature=config.backend_temperature,
            max_tokens=config.backend_max_tokens,
            session=session,
        )

    def close(self) -> None:
        """Close the HTTP session if this classifier created it."""
        if self._owns_session:
            self._session.close()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, prompt: PromptContext) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt.to_user_prompt()},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
        }

    def classify(self, prompt: PromptContext) -> dict:
        """Send one classification request and return the decoded verdict.

        Raises
        ------
        BackendError
            On any transport, HTTP, or decoding failure.
        """
        response = self._post_with_retry(self.build_payload(prompt))

        try:
            body = response.json()
        except ValueError as exc:
            raise BackendError("Backend response body is not valid JSON.") from exc

        content = _extract_message_content(body)
        if not content:
            raise BackendError("Empty completion from backend.")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise BackendError("Backend completion is not valid JSON.") from exc

        if not isinstance(parsed, dict):
            raise BackendError(
                f"Backend completion is a JSON {type(parsed).__name__}, expected an object."
            )
        return parsed

    def _post_with_retry(self, payload: dict) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        attempts = self.max_retries + 1
        last_error: Optional[BackendError] = None

        for attempt in range(1, attempts + 1):
            try:
                response = self._session.post(
                    self.endpoint,
                    json=payload,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.Timeout as exc:
                last_error = BackendError(
                    f"Backend request timed out after {self.timeout}s."
                )
                last_error.__cause__ = exc
            except requests.RequestException as exc:
                last_error = BackendError(f"Backend request failed: {exc}")
                last_error.__cause__ = exc
            else:
                if response.status_code < 400:
                    return response
                last_error = BackendError(
                    f"Backend returned HTTP {response.status_code}."
                )
                if response.status_code not in _RETRYABLE_STATUSES:
                    raise last_error

            if attempt < attempts:
                logger.info(
                    "Backend attempt %d/%d failed (%s). Retrying.",
                    attempt, attempts, last_error,
                )

        raise last_error


def _extract_message_content(body: Any) -> Optional[str]:
    """Return ``choices[0].message.content`` from a chat-completions body."""
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
