"""
Base settings for simple-buildnumber.

These settings are shared across all environments.
Environment-specific settings should go in development.py or ci.py.

Every value can be overridden from the environment, a .env file or a
settings.ini file (see python-decouple). Project properties and explicit goal
options take precedence over anything declared here.
"""

from decouple import config

# =============================================================================
# BUILD NUMBER STORE
# =============================================================================

# Key of the counter inside the properties file, also the name of the
# project property the resolved build number is published under.
PROPERTY_NAME = config("BUILDNUMBER_PROPERTY_NAME", default="buildNumber")

# Location of the counter file. Empty means "<project base>/buildNumber.properties".
PROPERTIES_FILE = config("BUILDNUMBER_PROPERTIES_FILE", default="")

PROPERTIES_FILE_NAME = "buildNumber.properties"


# =============================================================================
# VERSION COMPOSITION
# =============================================================================

# Keep the current build number instead of incrementing it
KEEP = config("BUILDNUMBER_KEEP", default=False, cast=bool)

# Drop the pre-release suffix from the composed version
RELEASE = config("BUILDNUMBER_RELEASE", default=False, cast=bool)

# Total number of version segments, build number included (>= 2)
VERSION_LENGTH = config("BUILDNUMBER_VERSION_LENGTH", default=3, cast=int)

# Pre-release marker appended unless RELEASE is set
SNAPSHOT_SUFFIX = "-SNAPSHOT"

# What "keep" does when the current version has no build segment:
# "omit" leaves it out, "zero" writes ".0"
KEEP_MISSING_BUILD = config("BUILDNUMBER_KEEP_MISSING_BUILD", default="omit")

# Format used by the eval goal to compute the artifact version
VERSION_FORMAT = config(
    "BUILDNUMBER_VERSION_FORMAT",
    default="${project.version}.${buildNumber}",
)


# =============================================================================
# PROJECT DESCRIPTOR
# =============================================================================

# Project descriptor looked up in the base directory when no path is given
DESCRIPTOR_FILE_NAME = config("BUILDNUMBER_DESCRIPTOR_FILE_NAME", default="pom.xml")

# Indentation of the project's own <version> element in the descriptor
INDENT_SPACES = config("BUILDNUMBER_INDENT_SPACES", default=4, cast=int)

# Project property receiving the derived final name (unset: not published)
FINAL_NAME_PROPERTY = config("BUILDNUMBER_FINAL_NAME_PROPERTY", default="") or None


# =============================================================================
# EXECUTION
# =============================================================================

SKIP = config("BUILDNUMBER_SKIP", default=False, cast=bool)

# Resolve the build number once for the whole build
RUN_ONCE = config("BUILDNUMBER_RUN_ONCE", default=True, cast=bool)


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "buildnumber": {
            "handlers": ["console"],
            "level": config("BUILDNUMBER_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
    },
}
