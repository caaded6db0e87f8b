"""
Tests for the core package.

This module tests:
- ProjectContext and loading it from a descriptor
- GoalOptions resolution and validation
- Settings module loading and logging setup
"""

import importlib
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest import TestCase
from unittest.mock import patch

import pytest

from .conf import GoalOptions, configure_logging, get_settings
from .context import ProjectContext
from .exceptions import BuildNumberError, ConfigurationError, ParseError, StorageError


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================


def create_settings(**kwargs):
    """Create a stand-in settings module with base defaults."""
    values = {
        "PROPERTY_NAME": "buildNumber",
        "PROPERTIES_FILE": "",
        "PROPERTIES_FILE_NAME": "buildNumber.properties",
        "KEEP": False,
        "RELEASE": False,
        "SKIP": False,
        "RUN_ONCE": True,
        "INDENT_SPACES": 4,
        "VERSION_LENGTH": 3,
        "KEEP_MISSING_BUILD": "omit",
        "SNAPSHOT_SUFFIX": "-SNAPSHOT",
        "FINAL_NAME_PROPERTY": None,
        "VERSION_FORMAT": "${project.version}.${buildNumber}",
        "DESCRIPTOR_FILE_NAME": "pom.xml",
        "LOGGING": {"version": 1},
    }
    values.update(kwargs)
    return SimpleNamespace(**values)


POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <artifactId>widget</artifactId>
    <version>2.4.1-SNAPSHOT</version>
    <properties>
        <major.minor.version>2.4</major.minor.version>
        <version.number.length>3</version.number.length>
    </properties>
    <build>
        <finalName>widget-2.4.1-SNAPSHOT-bin</finalName>
    </build>
</project>
"""


class TempDirTestCase(TestCase):
    """TestCase with a fresh temporary directory in ``self.tmp``."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)


# =============================================================================
# EXCEPTION TESTS
# =============================================================================


class ExceptionTests(TestCase):
    """Tests for the exception taxonomy."""

    def test_all_errors_share_a_base(self):
        """Every error can be caught as BuildNumberError."""
        for exc_class in (ConfigurationError, ParseError, StorageError):
            self.assertTrue(issubclass(exc_class, BuildNumberError))

    def test_storage_error_keeps_path(self):
        """StorageError carries the offending path."""
        exc = StorageError("boom", Path("/tmp/x"))

        self.assertEqual(exc.path, Path("/tmp/x"))
        self.assertEqual(str(exc), "boom")


# =============================================================================
# PROJECT CONTEXT TESTS
# =============================================================================


class ProjectContextTests(TempDirTestCase):
    """Tests for ProjectContext."""

    def test_defaults(self):
        """The descriptor defaults to pom.xml and artifact version to version."""
        ctx = ProjectContext(self.tmp, version="1.0")

        self.assertEqual(ctx.descriptor_path, self.tmp / "pom.xml")
        self.assertEqual(ctx.artifact_version, "1.0")
        self.assertIsNone(ctx.final_name)
        self.assertEqual(ctx.properties, {})

    def test_set_property_stringifies_and_ignores_none(self):
        """Values are stored as strings and None is ignored."""
        ctx = ProjectContext(self.tmp)

        ctx.set_property("buildNumber", 5)
        ctx.set_property("other", None)

        self.assertEqual(ctx.get_property("buildNumber"), "5")
        self.assertIsNone(ctx.get_property("other"))

    def test_properties_are_copied(self):
        """The context does not share the caller's dict."""
        props = {"a": "1"}
        ctx = ProjectContext(self.tmp, properties=props)
        ctx.set_property("b", "2")

        self.assertEqual(props, {"a": "1"})

    def test_from_descriptor(self):
        """Version, final name and properties are read from the pom."""
        pom = self.tmp / "pom.xml"
        pom.write_text(POM, encoding="utf-8")

        ctx = ProjectContext.from_descriptor(pom)

        self.assertEqual(ctx.base_dir, self.tmp)
        self.assertEqual(ctx.descriptor_path, pom)
        self.assertEqual(ctx.version, "2.4.1-SNAPSHOT")
        self.assertEqual(ctx.artifact_version, "2.4.1-SNAPSHOT")
        self.assertEqual(ctx.final_name, "widget-2.4.1-SNAPSHOT-bin")
        self.assertEqual(ctx.get_property("major.minor.version"), "2.4")
        self.assertEqual(ctx.get_property("version.number.length"), "3")

    def test_from_descriptor_default_final_name(self):
        """Without a finalName, artifactId-version is used."""
        pom = self.tmp / "pom.xml"
        pom.write_text("<project>\n    <artifactId>tool</artifactId>\n    <version>1.1</version>\n</project>\n")

        ctx = ProjectContext.from_descriptor(pom)

        self.assertEqual(ctx.final_name, "tool-1.1")

    def test_from_descriptor_invalid_xml(self):
        """Malformed XML is a parse error."""
        pom = self.tmp / "pom.xml"
        pom.write_text("<project><version>1.0</project>")

        with self.assertRaises(ParseError):
            ProjectContext.from_descriptor(pom)

    def test_from_descriptor_missing_file(self):
        """A missing descriptor is a storage error."""
        with self.assertRaises(StorageError):
            ProjectContext.from_descriptor(self.tmp / "pom.xml")

    def test_default_descriptor_name_from_settings(self):
        """Without a path, the descriptor name comes from the settings."""
        settings = create_settings(DESCRIPTOR_FILE_NAME="project.xml")

        with patch("buildnumber.core.context.get_settings", return_value=settings):
            ctx = ProjectContext(self.tmp)

        self.assertEqual(ctx.descriptor_path, self.tmp / "project.xml")

    def test_from_descriptor_interpolates_final_name(self):
        """Project coordinates and properties are substituted in finalName."""
        pom = self.tmp / "pom.xml"
        pom.write_text(
            "<project>\n"
            "    <groupId>org.example</groupId>\n"
            "    <artifactId>tool</artifactId>\n"
            "    <version>1.1.3</version>\n"
            "    <properties>\n"
            "        <classifier>bin</classifier>\n"
            "    </properties>\n"
            "    <build>\n"
            "        <finalName>${project.artifactId}-${project.version}-${classifier}-${unknown}</finalName>\n"
            "    </build>\n"
            "</project>\n"
        )

        ctx = ProjectContext.from_descriptor(pom)

        self.assertEqual(ctx.final_name, "tool-1.1.3-bin-${unknown}")


# =============================================================================
# GOAL OPTIONS TESTS
# =============================================================================


class GoalOptionsResolveTests(TempDirTestCase):
    """Tests for GoalOptions.resolve()."""

    def test_settings_defaults(self):
        """Settings values are used when nothing overrides them."""
        ctx = ProjectContext(self.tmp)

        options = GoalOptions.resolve(ctx, create_settings())

        self.assertEqual(options.property_name, "buildNumber")
        self.assertEqual(options.properties_file, self.tmp / "buildNumber.properties")
        self.assertFalse(options.keep)
        self.assertFalse(options.release)
        self.assertFalse(options.skip)
        self.assertTrue(options.run_once)
        self.assertEqual(options.indent_spaces, 4)
        self.assertEqual(options.segment_count, 3)
        self.assertEqual(options.missing_build, "omit")
        self.assertIsNone(options.final_base_name_property)

    def test_project_properties_override_settings(self):
        """Project properties beat the settings module."""
        ctx = ProjectContext(
            self.tmp,
            properties={
                "version.number.length": "4",
                "simple.buildNumber.propertyName": "revision",
                "simple.buildNumber.indentSpaces": "2",
                "simple.buildNumber.propertiesFilename": "conf/rev.properties",
            },
        )

        options = GoalOptions.resolve(ctx, create_settings(VERSION_LENGTH=5))

        self.assertEqual(options.segment_count, 4)
        self.assertEqual(options.property_name, "revision")
        self.assertEqual(options.indent_spaces, 2)
        self.assertEqual(options.properties_file, self.tmp / "conf" / "rev.properties")

    def test_explicit_overrides_win(self):
        """Keyword overrides beat project properties; None is ignored."""
        ctx = ProjectContext(self.tmp, properties={"version.number.length": "4"})

        options = GoalOptions.resolve(ctx, create_settings(), segment_count=2, release=True, skip=None)

        self.assertEqual(options.segment_count, 2)
        self.assertTrue(options.release)
        self.assertFalse(options.skip)

    def test_absolute_properties_file_kept(self):
        """An absolute counter file path is not rebased."""
        target = self.tmp / "elsewhere" / "bn.properties"

        options = GoalOptions.resolve(ProjectContext(self.tmp / "proj"), create_settings(PROPERTIES_FILE=str(target)))

        self.assertEqual(options.properties_file, target)

    def test_unknown_override_raises(self):
        """A misspelt option is rejected."""
        with self.assertRaises(ConfigurationError):
            GoalOptions.resolve(ProjectContext(self.tmp), create_settings(), relase=True)

    def test_non_integer_length_raises(self):
        """A non-numeric version length is a configuration error."""
        ctx = ProjectContext(self.tmp, properties={"version.number.length": "three"})

        with self.assertRaises(ConfigurationError):
            GoalOptions.resolve(ctx, create_settings())

    def test_unknown_missing_build_policy_raises(self):
        """Only 'omit' and 'zero' are accepted."""
        with self.assertRaises(ConfigurationError):
            GoalOptions.resolve(ProjectContext(self.tmp), create_settings(KEEP_MISSING_BUILD="guess"))

    def test_string_flags_are_cast(self):
        """Flags given as strings are interpreted as booleans."""
        options = GoalOptions(property_name="b", properties_file="b.properties", release="true", skip="0")

        self.assertTrue(options.release)
        self.assertFalse(options.skip)
        self.assertIsInstance(options.properties_file, Path)

    def test_flags_accept_decouple_truth_values(self):
        """Flags accept the same strings as decouple's cast=bool."""
        options = GoalOptions(
            property_name="b",
            properties_file="b.properties",
            keep="y",
            release="T",
            skip="off",
            run_once="",
        )

        self.assertTrue(options.keep)
        self.assertTrue(options.release)
        self.assertFalse(options.skip)
        self.assertFalse(options.run_once)

    def test_invalid_flag_raises(self):
        """A string that is not a truth value is a configuration error."""
        with self.assertRaises(ConfigurationError) as cm:
            GoalOptions(property_name="b", properties_file="b.properties", release="maybe")

        self.assertIn("release", str(cm.exception))


# =============================================================================
# SETTINGS TESTS
# =============================================================================


class SettingsTests(TestCase):
    """Tests for get_settings() and configure_logging()."""

    def test_get_settings_named_module(self):
        """An explicit module name is imported as is."""
        settings = get_settings("buildnumber.settings.base")

        self.assertEqual(settings.__name__, "buildnumber.settings.base")
        self.assertEqual(settings.PROPERTIES_FILE_NAME, "buildNumber.properties")

    def test_get_settings_from_environment(self):
        """BUILDNUMBER_SETTINGS_MODULE selects the module."""
        with patch.dict("os.environ", {"BUILDNUMBER_SETTINGS_MODULE": "buildnumber.settings.development"}):
            settings = get_settings()

        self.assertEqual(settings.__name__, "buildnumber.settings.development")
        self.assertEqual(settings.LOGGING["loggers"]["buildnumber"]["level"], "DEBUG")

    def test_configure_logging_applies_logging_dict(self):
        """configure_logging() hands the LOGGING dict to dictConfig."""
        settings = create_settings(LOGGING={"version": 1, "loggers": {}})

        with patch("logging.config.dictConfig") as dict_config:
            configure_logging(settings)

        dict_config.assert_called_once_with({"version": 1, "loggers": {}})


def test_base_settings_read_environment(monkeypatch):
    """Base settings pick up BUILDNUMBER_* variables."""
    monkeypatch.setenv("BUILDNUMBER_VERSION_LENGTH", "4")
    monkeypatch.setenv("BUILDNUMBER_RELEASE", "true")
    monkeypatch.setenv("BUILDNUMBER_PROPERTY_NAME", "revision")

    import buildnumber.settings.base as base

    base = importlib.reload(base)
    try:
        assert base.VERSION_LENGTH == 4
        assert base.RELEASE is True
        assert base.PROPERTY_NAME == "revision"
    finally:
        monkeypatch.undo()
        importlib.reload(base)


def test_ci_settings_require_properties_file(monkeypatch):
    """The CI settings refuse to load without an explicit counter file."""
    monkeypatch.delitem(sys.modules, "buildnumber.settings.ci", raising=False)
    monkeypatch.setenv("BUILDNUMBER_PROPERTIES_FILE", " ")

    with pytest.raises(ValueError):
        importlib.import_module("buildnumber.settings.ci")


def test_ci_settings_with_properties_file(monkeypatch, tmp_path):
    """The CI settings accept an explicit counter file."""
    monkeypatch.delitem(sys.modules, "buildnumber.settings.ci", raising=False)
    monkeypatch.setenv("BUILDNUMBER_PROPERTIES_FILE", str(tmp_path / "bn.properties"))

    ci = importlib.import_module("buildnumber.settings.ci")

    assert ci.PROPERTIES_FILE == str(tmp_path / "bn.properties")
    assert ci.LOGGING["handlers"]["console"]["formatter"] == "verbose"
