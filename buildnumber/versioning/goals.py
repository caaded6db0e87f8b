"""
Build number goals - the entry points a host build calls once per build.

- increment: bump the build segment of the project version (default goal)
- keep: rewrite the version with the current build segment (e.g. for a release)
- create: bump the stored counter only and publish it as a project property
- create-xml: compose "<major.minor.version>.<counter>[-SNAPSHOT]" from the counter
- eval: compute the artifact version from a format string
"""

from __future__ import annotations

import logging
import re

from buildnumber.core.conf import GoalOptions
from buildnumber.core.exceptions import ConfigurationError

from . import store
from .updater import (
    derive_final_name,
    read_descriptor_version,
    rewrite_descriptor_version,
    update_version,
)

logger = logging.getLogger(__name__)

MAJOR_MINOR_PROPERTY = "major.minor.version"

MAJOR_MINOR_HELP = """\
The 'major.minor.version' property has not been set.

This is the project's version as base: major.minor (eg: 1.0)

Add a new property to the project's 'pom.xml':

<project ...>
    ...
    <properties>
        <major.minor.version>1.0</major.minor.version>
        ...
    </properties>
    ...
</project>

This text is NOT parsed in any way. It is simply prepended
to the generated 'build number'."""

_PLACEHOLDER_RE = re.compile(r"\$\{(?P<name>[^}]+)\}")


class BuildNumberGoal:
    """
    Base class for the goals.

    Subclasses implement run(). execute() takes care of the "skip" flag and
    of the run-once guard, which stops a second execution in the same build
    before any file is touched.
    """

    name = ""
    honours_run_once = True

    def __init__(self, context, options: GoalOptions | None = None, settings=None, **overrides):
        self.context = context
        self.options = options or GoalOptions.resolve(context, settings, **overrides)

    def execute(self) -> bool:
        """
        Run the goal.

        Returns:
            True if the goal ran, False if it was skipped.
        """
        title = f"Simple BuildNumber ({self.name})"
        logger.info(title)
        logger.info("=" * len(title))
        logger.debug("project: %r", self.context)

        if self.options.skip:
            logger.info("Skipping execution.")
            return False

        if self.honours_run_once and self.options.run_once:
            previous = self.context.get_property(self.options.property_name)
            if previous is not None:
                logger.info("%s available from previous execution: %s", self.options.property_name, previous)
                return False

        self.run()
        return True

    def run(self) -> None:
        raise NotImplementedError

    def update_project_version(self, old_version: str, new_version: str) -> None:
        """Push a new version into the context and derive the new final name."""
        ctx = self.context

        logger.debug("[OLD] artifact version: %s", ctx.artifact_version)
        ctx.artifact_version = new_version
        logger.debug("[OLD] project version: %s", ctx.version)
        ctx.version = new_version

        logger.debug("[OLD] final name: %s", ctx.final_name)
        ctx.final_name = derive_final_name(ctx.final_name, old_version, new_version)
        logger.debug("[NEW] final name: %s", ctx.final_name)

    def publish_final_name(self) -> None:
        if self.options.final_base_name_property:
            self.context.set_property(self.options.final_base_name_property, self.context.final_name)


class IncrementGoal(BuildNumberGoal):
    """Increment the build segment of the project version."""

    name = "increment"
    keep = False

    def run(self) -> None:
        opts = self.options

        update = update_version(
            self.context.descriptor_path,
            segment_count=opts.segment_count,
            keep=self.keep,
            release=opts.release,
            indent_spaces=opts.indent_spaces,
            missing_build=opts.missing_build,
            suffix=opts.suffix,
        )

        if self.keep:
            stored, found = store.load(opts.properties_file, opts.property_name)
            if found and update.build is not None and stored != update.build:
                logger.warning(
                    "%s in %s is %s but the project version carries %s",
                    opts.property_name,
                    opts.properties_file,
                    stored,
                    update.build,
                )
            logger.info("*** Keeping previous version: %s", update.new_version)
        elif update.build is not None:
            store.store(opts.properties_file, opts.property_name, update.build)
            logger.info("New %s: %s", opts.property_name, update.build)

        resolved = update.build if update.build is not None else update.new_version
        self.context.set_property(opts.property_name, resolved)

        if update.changed:
            self.update_project_version(update.old_version, update.new_version)
        else:
            logger.info("Project version unchanged: %s", update.new_version)

        self.publish_final_name()


class KeepGoal(IncrementGoal):
    """Rewrite the project version without changing its build segment."""

    name = "keep"
    keep = True


class CreateGoal(BuildNumberGoal):
    """Increment the stored counter and publish it as a project property."""

    name = "create"

    def run(self) -> None:
        opts = self.options
        build_number = store.advance(opts.properties_file, opts.property_name, keep=opts.keep)
        self.context.set_property(opts.property_name, build_number)
        logger.info("%s: %s", opts.property_name, build_number)


class CreateXmlGoal(BuildNumberGoal):
    """Compose the project version from 'major.minor.version' and the stored counter."""

    name = "create-xml"

    def run(self) -> None:
        opts = self.options
        ctx = self.context

        major_minor = ctx.get_property(MAJOR_MINOR_PROPERTY)
        if not major_minor:
            logger.error(MAJOR_MINOR_HELP)
            raise ConfigurationError(
                "The 'major.minor.version' property has not been set. "
                "Example: <properties><major.minor.version>1.0</major.minor.version></properties>"
            )

        old_version = read_descriptor_version(ctx.descriptor_path, opts.indent_spaces)

        build_number = store.advance(opts.properties_file, opts.property_name, keep=opts.keep)
        ctx.set_property(opts.property_name, build_number)

        new_version = f"{major_minor}.{build_number}" + ("" if opts.release else opts.suffix)

        rewrite_descriptor_version(ctx.descriptor_path, new_version, opts.indent_spaces)
        self.update_project_version(old_version, new_version)
        self.publish_final_name()


class EvalGoal(BuildNumberGoal):
    """Set the artifact version from a ${...} format string."""

    name = "eval"
    honours_run_once = False

    def run(self) -> None:
        opts = self.options
        values = {"project.version": self.context.version}
        values.update(self.context.properties)

        def substitute(match):
            key = match.group("name")
            if key not in values:
                raise ConfigurationError(
                    f"Unresolved placeholder '${{{key}}}' in artifact version format: {opts.version_format}"
                )
            return str(values[key])

        artifact_version = _PLACEHOLDER_RE.sub(substitute, opts.version_format)
        if not opts.release:
            artifact_version += opts.suffix

        self.context.artifact_version = artifact_version
        logger.info("project.artifact.version: %s", artifact_version)


GOALS = {
    goal.name: goal
    for goal in (IncrementGoal, KeepGoal, CreateGoal, CreateXmlGoal, EvalGoal)
}


def make_goal(name: str, context, settings=None, **overrides) -> BuildNumberGoal:
    """Look up a goal by name and bind it to ``context``."""
    try:
        goal_class = GOALS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown goal: {name} (expected one of: {', '.join(GOALS)})"
        ) from None
    return goal_class(context, settings=settings, **overrides)


def run_goal(name: str, context, settings=None, **overrides) -> bool:
    """Look up a goal by name and execute it against ``context``."""
    return make_goal(name, context, settings, **overrides).execute()
