"""
Version store: the build counter persisted in a flat properties file.

The file holds ``<key>=<number>`` plus ``time=<epoch seconds>``, for example:

    #simple-buildnumber properties file
    #Mon Oct 19 10:43:02 2026
    buildNumber=12
    time=1792406582

Any other keys found in the file are kept when it is rewritten.
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from buildnumber.core.exceptions import ParseError, StorageError

logger = logging.getLogger(__name__)

HEADER = "simple-buildnumber properties file"

# Java properties files are ISO-8859-1
ENCODING = "latin-1"

TIME_KEY = "time"

_COUNTER_RE = re.compile(r"\d+", re.ASCII)

# key=value, key:value or key value
_LINE_RE = re.compile(r"^\s*(?P<key>[^=:\s]+)\s*(?:[=:]\s*|\s+)?(?P<value>.*?)\s*$")


def _ensure_exists(path: Path) -> None:
    if path.exists():
        return
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
    except OSError as exc:
        raise StorageError(f"Couldn't create properties file: {path}", path) from exc
    logger.debug("Created properties file: %s", path)


def read_properties(path) -> dict[str, str]:
    """
    Read a properties file into an ordered dict.

    Blank lines and lines starting with ``#`` or ``!`` are skipped.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=ENCODING)
    except OSError as exc:
        raise StorageError(f"Couldn't load properties file: {path}", path) from exc

    properties = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped[0] in "#!":
            continue
        match = _LINE_RE.match(line)
        if match:
            properties[match.group("key")] = match.group("value")
    return properties


def write_properties(path, properties: dict[str, str]) -> None:
    path = Path(path)
    lines = [f"#{HEADER}", "#" + time.strftime("%a %b %d %H:%M:%S %Y")]
    lines.extend(f"{key}={value}" for key, value in properties.items())
    try:
        path.write_text("\n".join(lines) + "\n", encoding=ENCODING, errors="backslashreplace")
    except OSError as exc:
        raise StorageError(f"Couldn't save properties file: {path}", path) from exc


def load(path, key: str) -> tuple[int, bool]:
    """
    Read the counter stored under ``key``.

    The file (and its parent directories) is created when absent.

    Returns:
        (value, found): ``value`` is 0 when the key is missing.

    Raises:
        ParseError: The stored value is not a non-negative integer.
        StorageError: The file cannot be created or read.
    """
    path = Path(path)
    _ensure_exists(path)

    raw = read_properties(path).get(key)
    logger.debug("%s : %s", key, raw)

    if raw is None:
        return 0, False
    if not _COUNTER_RE.fullmatch(raw):
        raise ParseError(f"Couldn't parse {key} in properties file to an Integer: {raw}")
    return int(raw), True


def store(path, key: str, value: int, timestamp: str | None = None) -> None:
    """Write ``value`` under ``key`` along with the ``time`` stamp."""
    path = Path(path)
    if timestamp is None:
        timestamp = str(int(time.time()))

    _ensure_exists(path)
    properties = read_properties(path)
    properties[key] = str(value)
    properties[TIME_KEY] = timestamp

    logger.debug("Storing properties: %s %s", path, properties)
    write_properties(path, properties)


def advance(path, key: str, keep: bool = False, timestamp: str | None = None) -> int:
    """
    Load the counter and, unless ``keep`` is set, increment it by one and store it.

    Returns:
        The resolved build number.
    """
    value, _ = load(path, key)

    if keep:
        logger.info("*** Keeping previous %s: %s", key, value)
        return value

    value += 1
    store(path, key, value, timestamp)
    logger.info("New %s: %s", key, value)
    return value
