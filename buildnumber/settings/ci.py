"""
CI settings for simple-buildnumber.

These settings extend base.py for build servers. The counter file must be
placed explicitly, because CI workspaces are usually wiped between builds.

Usage:
    export BUILDNUMBER_SETTINGS_MODULE=buildnumber.settings.ci
    export BUILDNUMBER_PROPERTIES_FILE=/var/lib/ci/myproject/buildNumber.properties
    buildnumber increment

IMPORTANT: Ensure BUILDNUMBER_PROPERTIES_FILE points to persistent storage.
"""

from decouple import config

from .base import *  # noqa: F401, F403

# =============================================================================
# BUILD NUMBER STORE
# =============================================================================

PROPERTIES_FILE = config("BUILDNUMBER_PROPERTIES_FILE")

if not PROPERTIES_FILE.strip():
    raise ValueError("BUILDNUMBER_PROPERTIES_FILE must be set in CI")


# =============================================================================
# LOGGING (Timestamps for build logs)
# =============================================================================

LOGGING["handlers"]["console"]["formatter"] = "verbose"  # noqa: F405
