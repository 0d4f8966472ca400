"""Environment-driven settings."""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:3000"
DEFAULT_TIMEOUT = 60.0


def get_api_url() -> str:
    """Return the base URL of the generation and storage services."""
    return os.environ.get("APPGEN_API_URL", DEFAULT_API_URL).rstrip("/")


def get_public_url() -> str:
    """Return the base URL used when building share links."""
    env = os.environ.get("APPGEN_PUBLIC_URL")
    if env:
        return env.rstrip("/")
    return get_api_url()


def get_timeout() -> float:
    """Return the HTTP timeout in seconds."""
    env = os.environ.get("APPGEN_TIMEOUT")
    if not env:
        return DEFAULT_TIMEOUT
    try:
        return float(env)
    except ValueError:
        logger.warning("Invalid APPGEN_TIMEOUT %r, using %ss", env, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
