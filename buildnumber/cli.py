"""
Command line runner for the build number goals.

Stands in for the host build: reads the project model from a pom.xml-shaped
descriptor, runs one goal and prints the resulting version.

Usage:
    buildnumber increment
    buildnumber keep --release --descriptor path/to/pom.xml
    buildnumber create-xml -D major.minor.version=1.0
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .core.conf import MISSING_BUILD_POLICIES, configure_logging, get_settings
from .core.context import ProjectContext
from .core.exceptions import BuildNumberError, ConfigurationError
from .versioning.goals import GOALS, make_goal

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildnumber",
        description="Maintain the build number of a project version.",
    )
    parser.add_argument("goal", choices=list(GOALS), help="Goal to run")
    parser.add_argument(
        "--descriptor",
        type=Path,
        help="Project descriptor file (default: ./pom.xml or $BUILDNUMBER_DESCRIPTOR_FILE_NAME)",
    )
    parser.add_argument("--settings", help="Settings module (default: $BUILDNUMBER_SETTINGS_MODULE)")
    parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a project property (repeatable)",
    )
    parser.add_argument("--properties-file", help="Build number properties file")
    parser.add_argument("--property-name", help="Build number property name")
    parser.add_argument("--length", type=int, dest="segment_count", help="Version number length (>= 2)")
    parser.add_argument("--indent", type=int, dest="indent_spaces", help="Indent of the <version> element")
    parser.add_argument("--release", action="store_true", default=None, help="Drop the -SNAPSHOT suffix")
    parser.add_argument(
        "--keep-number",
        action="store_true",
        default=None,
        dest="keep",
        help="Do not increment the stored counter (create, create-xml)",
    )
    parser.add_argument("--skip", action="store_true", default=None, help="Skip this execution")
    parser.add_argument(
        "--no-run-once",
        action="store_false",
        default=None,
        dest="run_once",
        help="Run even if the build number property is already set",
    )
    parser.add_argument(
        "--keep-missing-build",
        choices=MISSING_BUILD_POLICIES,
        dest="missing_build",
        help="keep goal: what to do when the version has no build segment",
    )
    parser.add_argument(
        "--final-name-property",
        dest="final_base_name_property",
        help="Project property receiving the derived final name",
    )
    parser.add_argument("--format", dest="version_format", help="eval goal: artifact version format")
    return parser


def _parse_defines(defines: list[str]) -> dict[str, str]:
    properties = {}
    for define in defines:
        name, sep, value = define.partition("=")
        if not sep or not name:
            raise ConfigurationError(f"Invalid property definition: {define!r} (expected NAME=VALUE)")
        properties[name] = value
    return properties


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings(args.settings)
        configure_logging(settings)

        descriptor = args.descriptor or Path(settings.DESCRIPTOR_FILE_NAME)
        context = ProjectContext.from_descriptor(descriptor)
        context.properties.update(_parse_defines(args.define))

        goal = make_goal(
            args.goal,
            context,
            settings=settings,
            properties_file=args.properties_file,
            property_name=args.property_name,
            segment_count=args.segment_count,
            indent_spaces=args.indent_spaces,
            release=args.release,
            keep=args.keep,
            skip=args.skip,
            run_once=args.run_once,
            missing_build=args.missing_build,
            final_base_name_property=args.final_base_name_property,
            version_format=args.version_format,
        )
        ran = goal.execute()
    except BuildNumberError as exc:
        logger.error("%s", exc)
        return 1

    if ran:
        if args.goal == "eval":
            print(context.artifact_version)
        elif args.goal == "create":
            print(context.get_property(goal.options.property_name))
        else:
            print(context.version)
    return 0


if __name__ == "__main__":
    sys.exit(main())
