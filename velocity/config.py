"""Centralized configuration for the Velocity sales copilot.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/velocity-copilot/<VARIABLE_NAME>``.

Unlike a hard requirement, a missing LLM credential is not fatal: the copilot
starts in offline mode and answers from local templates.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))

# Values that ship in example .env files and must be treated as unset
_PLACEHOLDER_VALUES = {"dummy_key", "changeme"}


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415  lazy import, only needed on AWS

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/velocity-copilot/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def is_placeholder(value: str | None) -> bool:
    """Return ``True`` for empty values and template placeholders."""
    if not value or not value.strip():
        return True
    return value.startswith("your_") or value in _PLACEHOLDER_VALUES


def _optional_secret(name: str) -> str | None:
    """Return a secret from env-var or SSM, or ``None`` when not configured."""
    value = os.getenv(name)
    if not is_placeholder(value):
        return value

    if _ON_AWS:
        ssm_value = _get_ssm_parameter(name)
        if not is_placeholder(ssm_value):
            return ssm_value

    logger.info("%s is not configured", name)
    return None


# ── LLM ─────────────────────────────────────────────────────────────
ANTHROPIC_API_KEY: str | None = _optional_secret("ANTHROPIC_API_KEY")
MODEL_NAME: str = os.getenv("MODEL_NAME", "claude-sonnet-4-5")

# Artifact drafting runs as a separate, tool-less call
GENERATION_MODEL_NAME: str = os.getenv("GENERATION_MODEL_NAME", MODEL_NAME)

# Upper bound on tool-call rounds per user request
MAX_TOOL_ITERATIONS: int = int(os.getenv("MAX_TOOL_ITERATIONS", "10"))

# ── Media generation (text-to-speech, video) ────────────────────────
MEDIA_API_BASE_URL: str | None = os.getenv("MEDIA_API_BASE_URL") or None
MEDIA_API_KEY: str | None = _optional_secret("MEDIA_API_KEY")

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
