"""
Logfire observability configuration for AdLauncher.

Provides tracing for:
- Template resolution and ad set duplication
- Per-group media upload, creative and ad creation steps

Usage:
    # At process startup (e.g., in the CLI)
    from adlauncher.core.observability import setup_logfire, setup_logging
    setup_logging()
    setup_logfire()

    # In pipeline code
    lf = get_logfire()
    with lf.span("create_creative", group_index=2):
        ...

Environment Variables:
    LOGFIRE_TOKEN: Your Logfire write token (required for production)
    LOGFIRE_ENVIRONMENT: Environment name (development, staging, production)
"""

import contextlib
import os
import sys
import logging
from typing import Optional

import logfire

from .config import Config

logger = logging.getLogger(__name__)

_logfire_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=(level or Config.LOG_LEVEL).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # httpx logs full request URLs at INFO, and those carry the access token
    logging.getLogger("httpx").setLevel(logging.WARNING)


def setup_logfire(environment: Optional[str] = None) -> bool:
    """
    Send pipeline spans and Graph API requests to Logfire.

    Returns:
        True if Logfire is active, False when LOGFIRE_TOKEN is unset or
        configuration failed
    """
    global _logfire_configured

    if _logfire_configured:
        return True

    token = os.environ.get("LOGFIRE_TOKEN")
    if not token:
        logger.debug("LOGFIRE_TOKEN not set, ad batch spans stay local")
        return False

    env = environment or os.environ.get("LOGFIRE_ENVIRONMENT", "development")
    try:
        logfire.configure(token=token, service_name="adlauncher", environment=env)
        logfire.instrument_httpx()
    except Exception as e:
        logger.error(f"Failed to configure Logfire: {e}")
        return False

    _logfire_configured = True
    logger.info(f"Logfire configured for adlauncher ({env})")
    return True


def get_logfire():
    """The logfire module once configured, else a stub with span() and info()."""
    if _logfire_configured:
        return logfire
    return _LogfireStub()


class _LogfireStub:

    def span(self, *args, **kwargs):
        return contextlib.nullcontext()

    def info(self, *args, **kwargs):
        pass
