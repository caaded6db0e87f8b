"""
Pytest configuration and shared fixtures for simple-buildnumber.

This module provides reusable fixtures for testing the version store, the
version updater and the goals against throwaway project directories.
"""

import pytest

from buildnumber.core.conf import GoalOptions
from buildnumber.core.context import ProjectContext


POM_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <parent>
        <groupId>org.example</groupId>
        <artifactId>example-parent</artifactId>
        <version>3.2.1</version>
    </parent>
    <groupId>org.example</groupId>
    <artifactId>app</artifactId>
    <version>{version}</version>
{properties}
    <build>
        <finalName>{final_name}</finalName>
    </build>
</project>
"""


def render_pom(version, final_name=None, properties=None):
    """Render a small pom.xml with the project version at a 4-space indent."""
    if final_name is None:
        final_name = f"app-{version}"

    lines = []
    if properties:
        lines.append("    <properties>")
        for name, value in properties.items():
            lines.append(f"        <{name}>{value}</{name}>")
        lines.append("    </properties>")

    return POM_TEMPLATE.format(version=version, final_name=final_name, properties="\n".join(lines))


# =============================================================================
# PROJECT FIXTURES
# =============================================================================


@pytest.fixture
def project_dir(tmp_path):
    """Provide an empty project base directory."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def write_pom(project_dir):
    """
    Fixture that writes a pom.xml into the project directory.

    Usage:
        def test_something(write_pom):
            pom = write_pom("1.0-SNAPSHOT")
    """

    def _write(version, final_name=None, properties=None):
        pom = project_dir / "pom.xml"
        pom.write_text(render_pom(version, final_name, properties), encoding="utf-8")
        return pom

    return _write


@pytest.fixture
def snapshot_pom(write_pom):
    """Create a pom.xml at version 1.0-SNAPSHOT with no build segment."""
    return write_pom("1.0-SNAPSHOT")


@pytest.fixture
def counter_file(project_dir):
    """Return the default location of the build number properties file."""
    return project_dir / "buildNumber.properties"


# =============================================================================
# CONTEXT FIXTURES
# =============================================================================


@pytest.fixture
def context(snapshot_pom):
    """Provide a ProjectContext loaded from the 1.0-SNAPSHOT pom."""
    return ProjectContext.from_descriptor(snapshot_pom)


@pytest.fixture
def make_options(counter_file):
    """
    Fixture that builds GoalOptions with the test counter file.

    Keyword arguments override the defaults.
    """

    def _make(**kwargs):
        kwargs.setdefault("property_name", "buildNumber")
        kwargs.setdefault("properties_file", counter_file)
        return GoalOptions(**kwargs)

    return _make
