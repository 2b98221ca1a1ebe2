"""Configuration and settings module for Scope Sentinel.

Provides the :class:`SentinelConfig` class which centralises all
configuration for the classification engine.  Configuration is resolved in
priority order:

1. **Environment variables** (highest priority) -- ``SCOPE_SENTINEL_*``
   (plus ``GROQ_API_KEY`` as a fallback for the backend API key)
2. **Config file** -- ``<project_root>/.scope-sentinel/config.json``
3. **Defaults** (lowest priority) -- sensible built-in values

Typical usage::

    config = SentinelConfig.load()                         # auto-detect project root
    config = SentinelConfig.load("/path/to/project")       # explicit project root
    config = SentinelConfig(backend_api_key="gsk_...")     # programmatic construction

    print(config.backend_configured)   # True when an API key is available
    print(config.log_level)            # "INFO"  (or overridden value)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Directory holding the config file, placed at the project root.
DEFAULT_CONFIG_DIR_NAME = ".scope-sentinel"

# Config file name inside the config directory.
CONFIG_FILE_NAME = "config.json"

# Environment variable prefix.  For example,
# ``SCOPE_SENTINEL_BACKEND_TIMEOUT_SECONDS=10``.
ENV_PREFIX = "SCOPE_SENTINEL_"

# Accepted as the backend API key when SCOPE_SENTINEL_BACKEND_API_KEY is unset.
GROQ_API_KEY_ENV = "GROQ_API_KEY"

DEFAULT_BACKEND_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_BACKEND_MODEL = "llama-3.3-70b-versatile"

# Sentinel files used to detect a project root directory.
PROJECT_ROOT_MARKERS = (
    ".git",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "package.json",
    DEFAULT_CONFIG_DIR_NAME,
)

_TRUE_VALUES = ("true", "1", "yes")

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class SentinelConfig(BaseModel):
    """Centralised configuration for the scope classification engine.

    Attributes
    ----------
    project_root:
        The detected or configured project root path.  Used to locate the
        config file.
    log_level:
        Python logging level name.  One of ``DEBUG``, ``INFO``, ``WARNING``,
        ``ERROR``, ``CRITICAL``.
    backend_enabled:
        Whether the external classifier may be used at all.  When *False*
        every analysis runs the heuristic classifier.
    backend_api_key:
        API key for the OpenAI-compatible chat-completions backend.  The
        backend is only used when this is set.
    backend_base_url / backend_model:
        Endpoint and model for the backend (Groq by default).
    backend_timeout_seconds:
        Per-request timeout.  Expiry counts as a backend failure.
    backend_max_retries:
        Extra attempts after a transport failure (0 or 1).
    backend_temperature / backend_max_tokens:
        Sampling parameters sent with each request.
    contract_excerpt_chars:
        Number of contract characters included in the backend prompt.
    """

    project_root: Optional[str] = Field(
        default=None,
        description="Detected or configured project root path.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )
    backend_enabled: bool = Field(
        default=True,
        description="Allow the external classifier when an API key is set.",
    )
    backend_api_key: Optional[str] = Field(
        default=None,
        description="API key for the external classifier.",
    )
    backend_base_url: str = Field(
        default=DEFAULT_BACKEND_BASE_URL,
        min_length=1,
        description="Base URL of the OpenAI-compatible API.",
    )
    backend_model: str = Field(
        default=DEFAULT_BACKEND_MODEL,
        min_length=1,
        description="Chat model used for classification.",
    )
    backend_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        le=120,
        description="Backend request timeout in seconds.",
    )
    backend_max_retries: int = Field(
        default=0,
        ge=0,
        le=1,
        description="Retries after a transport failure before falling back.",
    )
    backend_temperature: float = Field(
        default=0.3,
        ge=0,
        le=2,
        description="Sampling temperature for the backend model.",
    )
    backend_max_tokens: int = Field(
        default=1500,
        ge=1,
        description="Maximum completion tokens requested from the backend.",
    )
    contract_excerpt_chars: int = Field(
        default=2000,
        ge=0,
        description="Contract characters forwarded to the backend.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def resolve_project_root(self) -> "SentinelConfig":
        """Resolve ``project_root`` to an absolute path, detecting it if unset."""
        if self.project_root is not None:
            self.project_root = str(Path(self.project_root).resolve())
        else:
            detected = _detect_project_root()
            self.project_root = str(detected if detected is not None else Path.cwd())
        return self

    @model_validator(mode="after")
    def validate_log_level(self) -> "SentinelConfig":
        """Normalise and validate the log level string."""
        normalised = self.log_level.upper().strip()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalised not in valid_levels:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(valid_levels))}."
            )
        self.log_level = normalised
        return self

    @model_validator(mode="after")
    def normalise_api_key(self) -> "SentinelConfig":
        """Treat a blank API key as unset."""
        if self.backend_api_key is not None and not self.backend_api_key.strip():
            self.backend_api_key = None
        return self

    # ------------------------------------------------------------------
    # Factory: load from file + environment
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        project_root: Optional[str] = None,
        config_path: Optional[str] = None,
    ) -> "SentinelConfig":
        """Load configuration with full resolution: env -> file -> defaults.

        Parameters
        ----------
        project_root:
            Explicit project root.  When *None*, auto-detection is used.
        config_path:
            Explicit path to a ``config.json`` file.  When *None*, the
            config file is looked up at
            ``<project_root>/.scope-sentinel/config.json``.
        """
        if project_root is not None:
            resolved_root = str(Path(project_root).resolve())
        else:
            detected = _detect_project_root()
            resolved_root = str(detected if detected is not None else Path.cwd())

        merged: dict = {}
        merged.update(cls._drop_invalid_values(
            _load_config_file(resolved_root, config_path), "config file", resolved_root,
        ))
        merged.update(cls._drop_invalid_values(
            _load_env_overrides(), "environment", resolved_root,
        ))
        merged["project_root"] = resolved_root

        return cls.model_validate(merged)

    @classmethod
    def _drop_invalid_values(cls, values: dict, source: str, project_root: str) -> dict:
        """Return *values* without the entries that fail field validation.

        Each entry is validated on its own so one bad value never discards
        the rest.  Dropped entries are logged and fall back to the next
        source in priority order.
        """
        valid: dict = {}
        for key, value in values.items():
            if key == "project_root":
                continue
            try:
                cls.model_validate({"project_root": project_root, key: value})
            except ValidationError as exc:
                shown = "****" if key == "backend_api_key" else repr(value)
                logger.warning(
                    "Invalid %s value for %s: %s (%s). Ignoring.",
                    source, key, shown, exc.errors()[0]["msg"],
                )
                continue
            valid[key] = value
        return valid

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    @property
    def backend_configured(self) -> bool:
        """True when the external classifier should be tried first."""
        return self.backend_enabled and self.backend_api_key is not None

    def configure_logging(self) -> None:
        """Apply the configured log level to the ``scope_sentinel`` logger.

        Idempotent: a handler is only added the first time.
        """
        pkg_logger = logging.getLogger("scope_sentinel")
        pkg_logger.setLevel(self.log_level)

        if not pkg_logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(self.log_level)
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            pkg_logger.addHandler(handler)

    def to_dict(self) -> dict:
        """Return all configuration values, with the API key masked."""
        data = self.model_dump()
        if data.get("backend_api_key"):
            data["backend_api_key"] = _mask_secret(data["backend_api_key"])
        data["backend_configured"] = self.backend_configured
        return data

    def __repr__(self) -> str:
        return (
            f"SentinelConfig("
            f"project_root={self.project_root!r}, "
            f"log_level={self.log_level!r}, "
            f"backend_configured={self.backend_configured}, "
            f"backend_model={self.backend_model!r}, "
            f"backend_timeout_seconds={self.backend_timeout_seconds}"
            f")"
        )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _mask_secret(secret: str) -> str:
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"


def _detect_project_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Walk upward from *start_path* to find the project root.

    Returns the first directory containing one of
    :data:`PROJECT_ROOT_MARKERS`, or *None* if the filesystem root is
    reached first.
    """
    current = (start_path or Path.cwd()).resolve()

    max_depth = 50
    for _ in range(max_depth):
        for marker in PROJECT_ROOT_MARKERS:
            if (current / marker).exists():
                return current

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_config_file(
    project_root: str,
    config_path: Optional[str] = None,
) -> dict:
    """Read a ``config.json`` file and return its contents as a dict.

    Returns an empty dict if the file does not exist or is malformed.
    """
    if config_path is not None:
        path = Path(config_path).resolve()
    else:
        path = Path(project_root) / DEFAULT_CONFIG_DIR_NAME / CONFIG_FILE_NAME

    if not path.is_file():
        logger.debug("No config file at %s. Using defaults.", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
        if not isinstance(data, dict):
            logger.warning(
                "Config file %s does not contain a JSON object. Ignoring.",
                path,
            )
            return {}
        logger.info("Loaded configuration from %s", path)
        return data
    except json.JSONDecodeError:
        logger.warning(
            "Config file %s contains invalid JSON. Ignoring.",
            path,
            exc_info=True,
        )
        return {}
    except OSError:
        logger.warning(
            "Could not read config file %s. Ignoring.",
            path,
            exc_info=True,
        )
        return {}


def _load_env_overrides() -> dict:
    """Read ``SCOPE_SENTINEL_*`` environment variables and return overrides.

    Invalid numeric values are logged and ignored.  ``GROQ_API_KEY`` is used
    for ``backend_api_key`` when ``SCOPE_SENTINEL_BACKEND_API_KEY`` is unset.
    """
    overrides: dict = {}

    _str_keys = {
        "LOG_LEVEL": "log_level",
        "BACKEND_API_KEY": "backend_api_key",
        "BACKEND_BASE_URL": "backend_base_url",
        "BACKEND_MODEL": "backend_model",
    }
    for env_key, field_name in _str_keys.items():
        val = os.environ.get(f"{ENV_PREFIX}{env_key}")
        if val is not None:
            overrides[field_name] = val

    if "backend_api_key" not in overrides:
        groq_key = os.environ.get(GROQ_API_KEY_ENV)
        if groq_key is not None:
            overrides["backend_api_key"] = groq_key

    backend_enabled = os.environ.get(f"{ENV_PREFIX}BACKEND_ENABLED")
    if backend_enabled is not None:
        overrides["backend_enabled"] = backend_enabled.lower() in _TRUE_VALUES

    _int_keys = {
        "BACKEND_MAX_RETRIES": "backend_max_retries",
        "BACKEND_MAX_TOKENS": "backend_max_tokens",
        "CONTRACT_EXCERPT_CHARS": "contract_excerpt_chars",
    }
    for env_key, field_name in _int_keys.items():
        val = os.environ.get(f"{ENV_PREFIX}{env_key}")
        if val is not None:
            try:
                overrides[field_name] = int(val)
            except ValueError:
                logger.warning(
                    "Invalid %s%s value: %r. Must be an integer. Ignoring.",
                    ENV_PREFIX, env_key, val,
                )

    _float_keys = {
        "BACKEND_TIMEOUT_SECONDS": "backend_timeout_seconds",
        "BACKEND_TEMPERATURE": "backend_temperature",
    }
    for env_key, field_name in _float_keys.items():
        val = os.environ.get(f"{ENV_PREFIX}{env_key}")
        if val is not None:
            try:
                overrides[field_name] = float(val)
            except ValueError:
                logger.warning(
                    "Invalid %s%s value: %r. Must be a number. Ignoring.",
                    ENV_PREFIX, env_key, val,
                )

    if overrides:
        logger.info(
            "Environment overrides applied: %s",
            ", ".join(overrides.keys()),
        )

    return overrides
