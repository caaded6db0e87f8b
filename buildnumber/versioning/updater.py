"""
Version updater: parse, compose and write back the project version.

The descriptor is treated as opaque text. Its own <version> element is found
by indentation (4 spaces in a conventionally formatted pom.xml), so nested
<version> elements of parents, dependencies and plugins never match.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import NamedTuple

from buildnumber.core.exceptions import ConfigurationError, ParseError, StorageError

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = "-SNAPSHOT"


class ParsedVersion(NamedTuple):
    main: str
    build: int | None
    suffix: str | None


class VersionUpdate(NamedTuple):
    changed: bool
    old_version: str
    new_version: str
    build: int | None


def version_pattern(segment_count: int, suffix: str = SNAPSHOT_SUFFIX) -> re.Pattern:
    """
    Compile the version pattern for a version of ``segment_count`` segments.

    The last segment is the build number and is optional, so "1.0" and
    "1.0.7-SNAPSHOT" both match with the default length of 3.
    """
    if segment_count < 2:
        raise ConfigurationError("'version.number.length' MUST be greater than or equal to '2'.")

    return re.compile(
        rf"^(?P<main>\d+(?:\.\d+){{{segment_count - 2}}})"
        rf"(?:\.(?P<build>\d+))?"
        rf"(?P<suffix>{re.escape(suffix)})?$"
    )


def parse_version(text: str, segment_count: int, suffix: str = SNAPSHOT_SUFFIX) -> ParsedVersion:
    match = version_pattern(segment_count, suffix).match(text)
    if match is None:
        raise ParseError(
            f"No valid version text found: {text}\n"
            f"Possible incorrect setting for 'version.number.length': {segment_count}"
        )

    build = match.group("build")
    return ParsedVersion(
        main=match.group("main"),
        build=int(build) if build is not None else None,
        suffix=match.group("suffix"),
    )


def compose_version(
    parsed: ParsedVersion,
    keep: bool = False,
    release: bool = False,
    missing_build: str = "omit",
    suffix: str = SNAPSHOT_SUFFIX,
) -> tuple[str, int | None]:
    """
    Compose the next version from a parsed one.

    Args:
        parsed: The current version.
        keep: Reuse the current build number instead of incrementing it.
        release: Leave the pre-release suffix off.
        missing_build: Under ``keep`` with no current build number, "omit"
            leaves the build segment out and "zero" starts it at 0.
        suffix: The pre-release marker.

    Returns:
        (new_version, build): ``build`` is None when the segment is omitted.
    """
    if parsed.build is None:
        if keep and missing_build == "omit":
            build = None
        else:
            build = 0
    elif keep:
        build = parsed.build
    else:
        build = parsed.build + 1

    version = parsed.main
    if build is not None:
        version += f".{build}"
    if not release:
        version += suffix

    return version, build


def _descriptor_pattern(indent_spaces: int) -> re.Pattern:
    return re.compile(
        rf"^(?P<lead> {{{indent_spaces}}}<version>)(?P<text>[^<]*)(?P<tail></version> *\n)",
        re.MULTILINE,
    )


# encoding="..." in the XML declaration, after an optional UTF-8 BOM
_XML_ENCODING_RE = re.compile(
    rb"""^(?:\xef\xbb\xbf)?<\?xml[^>]*?encoding=["'](?P<encoding>[A-Za-z0-9._-]+)["']"""
)


def _read_descriptor(path: Path) -> tuple[str, str]:
    """Return the descriptor text and the encoding named in its XML declaration."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise StorageError(f"Couldn't read project descriptor: {path}", path) from exc

    match = _XML_ENCODING_RE.match(data)
    encoding = match.group("encoding").decode("ascii") if match else "utf-8"
    try:
        content = data.decode(encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        raise ParseError(f"Couldn't decode project descriptor {path} as {encoding}: {exc}") from exc
    return content.replace("\r\n", "\n"), encoding


def _find_version(content: str, path: Path, indent_spaces: int) -> re.Match:
    matches = list(_descriptor_pattern(indent_spaces).finditer(content))
    if not matches:
        raise ParseError(
            f"<version> tag: Not Found in {path} "
            f"(expected at an indent of {indent_spaces} spaces)"
        )
    if len(matches) > 1:
        raise ParseError(
            f"<version> tag: {len(matches)} candidates found in {path} "
            f"at an indent of {indent_spaces} spaces, expected exactly one"
        )
    return matches[0]


def read_descriptor_version(descriptor_path, indent_spaces: int = 4) -> str:
    """Return the project version text stored in the descriptor."""
    path = Path(descriptor_path)
    content, _ = _read_descriptor(path)
    match = _find_version(content, path, indent_spaces)
    return match.group("text").strip()


def rewrite_descriptor_version(descriptor_path, new_version: str, indent_spaces: int = 4) -> bool:
    """
    Replace the project version in the descriptor.

    Args:
        descriptor_path: Path to the descriptor file.
        new_version: The version text to write.
        indent_spaces: Indentation of the project's <version> element.

    Returns:
        True if the file was rewritten, False if it already held ``new_version``.
    """
    path = Path(descriptor_path)
    content, encoding = _read_descriptor(path)
    match = _find_version(content, path, indent_spaces)

    if match.group("text").strip() == new_version:
        return False

    replacement = match.group("lead") + new_version + match.group("tail")
    logger.debug("replacement: |%s|", replacement)
    new_content = content[: match.start()] + replacement + content[match.end():]

    try:
        path.write_text(new_content, encoding=encoding)
    except OSError as exc:
        raise StorageError(f"Couldn't write project descriptor: {path}", path) from exc

    logger.info("Updated %s: %s -> %s", path, match.group("text").strip(), new_version)
    return True


def update_version(
    descriptor_path,
    segment_count: int = 3,
    keep: bool = False,
    release: bool = False,
    indent_spaces: int = 4,
    missing_build: str = "omit",
    suffix: str = SNAPSHOT_SUFFIX,
) -> VersionUpdate:
    """
    Update the build number component of the version in the descriptor.

    Also sets or drops the pre-release suffix. The descriptor is only
    rewritten when the composed version differs from the stored one, and is
    left untouched on any error.

    Raises:
        ConfigurationError: ``segment_count`` is less than 2.
        ParseError: No single version element, or its text does not match.
        StorageError: The descriptor cannot be read or written.
    """
    # Reject a bad length before touching the descriptor
    version_pattern(segment_count, suffix)
    logger.debug("release: %s, keep: %s", release, keep)

    old_version = read_descriptor_version(descriptor_path, indent_spaces)
    logger.debug("/project/version : %s", old_version)

    parsed = parse_version(old_version, segment_count, suffix)
    logger.debug("main : %s, build : %s, suffix : %s", *parsed)

    new_version, build = compose_version(parsed, keep, release, missing_build, suffix)
    logger.debug("output : %s", new_version)

    changed = new_version != old_version
    if changed:
        rewrite_descriptor_version(descriptor_path, new_version, indent_spaces)

    return VersionUpdate(changed, old_version, new_version, build)


def derive_final_name(current_name: str | None, old_version: str, new_version: str) -> str | None:
    """
    Replace the first occurrence of ``old_version`` in the output base name.

    A name that does not contain the old version is returned unchanged and
    a warning is logged.
    """
    if not current_name or not old_version or old_version not in current_name:
        logger.warning("WARNING: project.build.finalName - Not Updated")
        return current_name

    return current_name.replace(old_version, new_version, 1)
