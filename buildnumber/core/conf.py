"""
Settings loading and goal option resolution.

Goal options come from four places, highest precedence first:
explicit keyword overrides, project properties, the settings module,
built-in defaults (which live in the settings module too).
"""

from __future__ import annotations

import importlib
import logging.config
from dataclasses import dataclass, fields
from pathlib import Path

from decouple import config, strtobool

from .exceptions import ConfigurationError

DEFAULT_SETTINGS_MODULE = "buildnumber.settings.base"

MISSING_BUILD_POLICIES = ("omit", "zero")

# Project properties recognised as configuration, mapped to option names
PROJECT_PROPERTY_OPTIONS = {
    "simple.buildNumber.propertyName": "property_name",
    "simple.buildNumber.propertiesFilename": "properties_file",
    "simple.buildNumber.indentSpaces": "indent_spaces",
    "version.number.length": "segment_count",
    "project.artifact.version.format": "version_format",
}


def get_settings(module: str | None = None):
    """Import the settings module named by BUILDNUMBER_SETTINGS_MODULE."""
    name = module or config("BUILDNUMBER_SETTINGS_MODULE", default=DEFAULT_SETTINGS_MODULE)
    return importlib.import_module(name)


def configure_logging(settings=None) -> None:
    """Apply the LOGGING dict of the given (or current) settings module."""
    if settings is None:
        settings = get_settings()
    logging.config.dictConfig(settings.LOGGING)


def _as_bool(name: str, value) -> bool:
    """Accept the same truth values as decouple's cast=bool."""
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text:
        return False
    try:
        return strtobool(text)
    except ValueError:
        raise ConfigurationError(f"'{name}' must be a boolean, got: {value!r}") from None


def _as_int(name: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be an integer, got: {value!r}") from None


@dataclass
class GoalOptions:
    """Resolved configuration of a single goal execution."""

    property_name: str
    properties_file: Path
    keep: bool = False
    release: bool = False
    skip: bool = False
    run_once: bool = True
    indent_spaces: int = 4
    segment_count: int = 3
    missing_build: str = "omit"
    suffix: str = "-SNAPSHOT"
    final_base_name_property: str | None = None
    version_format: str = "${project.version}.${buildNumber}"

    def __post_init__(self) -> None:
        self.properties_file = Path(self.properties_file)
        self.keep = _as_bool("keep", self.keep)
        self.release = _as_bool("release", self.release)
        self.skip = _as_bool("skip", self.skip)
        self.run_once = _as_bool("runOnce", self.run_once)
        self.indent_spaces = _as_int("indentSpaces", self.indent_spaces)
        self.segment_count = _as_int("version.number.length", self.segment_count)

        if self.missing_build not in MISSING_BUILD_POLICIES:
            raise ConfigurationError(
                f"Unknown keep-missing-build policy: {self.missing_build!r} "
                f"(expected one of: {', '.join(MISSING_BUILD_POLICIES)})"
            )
        if self.indent_spaces < 0:
            raise ConfigurationError("'indentSpaces' must not be negative.")

    @classmethod
    def resolve(cls, context, settings=None, **overrides) -> "GoalOptions":
        """
        Build the options for a goal running against ``context``.

        Args:
            context: The ProjectContext; its property map may carry configuration.
            settings: Settings module (defaults to get_settings()).
            **overrides: Explicit option values. ``None`` values are ignored.

        Returns:
            A validated GoalOptions instance.
        """
        if settings is None:
            settings = get_settings()

        values = {
            "property_name": settings.PROPERTY_NAME,
            "properties_file": settings.PROPERTIES_FILE or "",
            "keep": settings.KEEP,
            "release": settings.RELEASE,
            "skip": settings.SKIP,
            "run_once": settings.RUN_ONCE,
            "indent_spaces": settings.INDENT_SPACES,
            "segment_count": settings.VERSION_LENGTH,
            "missing_build": settings.KEEP_MISSING_BUILD,
            "suffix": settings.SNAPSHOT_SUFFIX,
            "final_base_name_property": settings.FINAL_NAME_PROPERTY,
            "version_format": settings.VERSION_FORMAT,
        }

        for prop, option in PROJECT_PROPERTY_OPTIONS.items():
            value = context.get_property(prop)
            if value:
                values[option] = value

        known = {f.name for f in fields(cls)}
        for option, value in overrides.items():
            if option not in known:
                raise ConfigurationError(f"Unknown option: {option}")
            if value is not None:
                values[option] = value

        if not values["properties_file"]:
            values["properties_file"] = context.base_dir / settings.PROPERTIES_FILE_NAME
        else:
            path = Path(values["properties_file"])
            values["properties_file"] = path if path.is_absolute() else context.base_dir / path

        return cls(**values)
