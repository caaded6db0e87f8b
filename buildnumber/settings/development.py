"""
Development settings for simple-buildnumber.

These settings extend base.py for local work on a project: every step of
the version update is logged.

Usage:
    export BUILDNUMBER_SETTINGS_MODULE=buildnumber.settings.development
    buildnumber increment
"""

from .base import *  # noqa: F401, F403

# =============================================================================
# LOGGING (More verbose in development)
# =============================================================================

LOGGING["loggers"]["buildnumber"]["level"] = "DEBUG"  # noqa: F405
