# context.py - In-memory view of the host build's project model
#
# Goals never talk to the build tool directly. They read and write a
# ProjectContext, and the host copies the results back into its own model.

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from .conf import get_settings
from .exceptions import ParseError, StorageError

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip the XML namespace from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _child(element, name: str):
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element, name: str) -> str | None:
    child = _child(element, name) if element is not None else None
    if child is None or child.text is None:
        return None
    return child.text.strip()


_PLACEHOLDER_RE = re.compile(r"\$\{(?P<name>[^}]+)\}")


def _interpolate(text: str, values: dict) -> str:
    """Replace ${name} references found in ``values``; others are left as they are."""
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group("name"), m.group(0)), text)


class ProjectContext:
    """
    The parts of a project model touched by the build number goals.

    Like the project object a build tool hands to its plugins, but only with
    the fields these goals need: the version, the artifact version, the final
    name of the packaged output and the named property map.
    """

    def __init__(
        self,
        base_dir,
        *,
        version: str = "",
        artifact_version: str | None = None,
        final_name: str | None = None,
        properties: dict | None = None,
        descriptor_path=None,
    ):
        self.base_dir = Path(base_dir)
        self.version = version
        self.artifact_version = artifact_version if artifact_version is not None else version
        self.final_name = final_name
        self.properties = dict(properties or {})
        if descriptor_path is None:
            descriptor_path = self.base_dir / get_settings().DESCRIPTOR_FILE_NAME
        self.descriptor_path = Path(descriptor_path)

    def __repr__(self) -> str:
        return f"<ProjectContext {self.base_dir} version={self.version!r}>"

    def get_property(self, name: str) -> str | None:
        return self.properties.get(name)

    def set_property(self, name: str, value) -> None:
        """Set a project property. A ``None`` value is ignored."""
        if value is not None:
            self.properties[name] = str(value)

    @classmethod
    def from_descriptor(cls, descriptor_path) -> "ProjectContext":
        """
        Build a context from a pom.xml-shaped descriptor file.

        Reads /project/version, /project/build/finalName and the children of
        /project/properties. ${project.version}, ${project.artifactId},
        ${project.groupId} and project properties are substituted in the
        finalName. Without a finalName the usual "<artifactId>-<version>"
        default is used.

        Raises:
            StorageError: The descriptor cannot be read.
            ParseError: The descriptor is not well-formed XML.
        """
        path = Path(descriptor_path)
        try:
            root = ET.parse(path).getroot()
        except OSError as exc:
            raise StorageError(f"Couldn't read project descriptor: {path}", path) from exc
        except ET.ParseError as exc:
            raise ParseError(f"Project descriptor is not valid XML: {path} ({exc})") from exc

        version = _child_text(root, "version") or ""
        artifact_id = _child_text(root, "artifactId") or path.parent.resolve().name

        properties = {}
        properties_element = _child(root, "properties")
        if properties_element is not None:
            for prop in properties_element:
                properties[_local_name(prop.tag)] = (prop.text or "").strip()

        final_name = _child_text(_child(root, "build"), "finalName")
        if final_name:
            final_name = _interpolate(
                final_name,
                {
                    **properties,
                    "project.version": version,
                    "project.artifactId": artifact_id,
                    "project.groupId": _child_text(root, "groupId") or "",
                },
            )
        else:
            final_name = f"{artifact_id}-{version}"

        logger.debug("Loaded project %s %s from %s", artifact_id, version, path)

        return cls(
            path.parent,
            version=version,
            final_name=final_name,
            properties=properties,
            descriptor_path=path,
        )
