"""
Tests for the versioning package.

This module tests:
- The build counter store (properties file)
- Version parsing, composition and descriptor rewriting
- Final name derivation
- The goals run by the host build

Uses unittest TestCase classes with pytest compatibility, plus a few
fixture-based scenario tests at the end.
"""

import tempfile
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from buildnumber.core.conf import GoalOptions
from buildnumber.core.context import ProjectContext
from buildnumber.core.exceptions import ConfigurationError, ParseError, StorageError

from . import store
from .goals import (
    CreateGoal,
    CreateXmlGoal,
    EvalGoal,
    IncrementGoal,
    KeepGoal,
    run_goal,
)
from .updater import (
    ParsedVersion,
    compose_version,
    derive_final_name,
    parse_version,
    read_descriptor_version,
    rewrite_descriptor_version,
    update_version,
    version_pattern,
)


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================


def write_pom(directory, version, final_name=None, properties=None):
    """Write a minimal pom.xml and return its path."""
    if final_name is None:
        final_name = f"app-{version}"
    props = "".join(f"        <{k}>{v}</{k}>\n" for k, v in (properties or {}).items())
    text = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
        "    <modelVersion>4.0.0</modelVersion>\n"
        "    <parent>\n"
        "        <artifactId>parent</artifactId>\n"
        "        <version>9.9.9</version>\n"
        "    </parent>\n"
        "    <artifactId>app</artifactId>\n"
        f"    <version>{version}</version>\n"
        "    <properties>\n"
        f"{props}"
        "    </properties>\n"
        "    <build>\n"
        f"        <finalName>{final_name}</finalName>\n"
        "    </build>\n"
        "</project>\n"
    )
    path = Path(directory) / "pom.xml"
    path.write_text(text, encoding="utf-8")
    return path


def create_options(directory, **kwargs):
    """Create GoalOptions pointing at a counter file in ``directory``."""
    kwargs.setdefault("property_name", "buildNumber")
    kwargs.setdefault("properties_file", Path(directory) / "buildNumber.properties")
    return GoalOptions(**kwargs)


class TempDirTestCase(TestCase):
    """TestCase with a fresh temporary directory in ``self.tmp``."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)


# =============================================================================
# VERSION STORE TESTS
# =============================================================================


class StoreLoadTests(TempDirTestCase):
    """Tests for store.load()."""

    def test_load_creates_file_and_parent_directories(self):
        """A missing file is created along with its parents."""
        path = self.tmp / "nested" / "dir" / "buildNumber.properties"

        value, found = store.load(path, "buildNumber")

        self.assertTrue(path.exists())
        self.assertEqual(value, 0)
        self.assertFalse(found)

    def test_load_existing_value(self):
        """A stored value is returned and reported as found."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("#comment\nbuildNumber=41\ntime=1700000000\n")

        self.assertEqual(store.load(path, "buildNumber"), (41, True))

    def test_load_custom_key(self):
        """The counter is looked up under the configured key only."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("buildNumber=3\nrevision=12\n")

        self.assertEqual(store.load(path, "revision"), (12, True))
        self.assertEqual(store.load(path, "missing"), (0, False))

    def test_load_non_integer_value_raises(self):
        """A value that is not an integer is a parse error."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("buildNumber=abc\n")

        with self.assertRaises(ParseError) as cm:
            store.load(path, "buildNumber")

        self.assertIn("abc", str(cm.exception))

    def test_load_negative_value_raises(self):
        """The counter cannot be negative."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("buildNumber=-1\n")

        with self.assertRaises(ParseError):
            store.load(path, "buildNumber")

    def test_load_non_ascii_digits_raises(self):
        """Unicode digits such as superscripts are not a counter value."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("buildNumber=²\n", encoding="utf-8")

        with self.assertRaises(ParseError):
            store.load(path, "buildNumber")

    def test_load_latin1_file(self):
        """Files written in ISO-8859-1 with a localized date comment load."""
        path = self.tmp / "buildNumber.properties"
        path.write_bytes(b"#simple-buildnumber properties file\n#mer. f\xe9vr. 14 10:00:00 2024\nbuildNumber=12\n")

        self.assertEqual(store.load(path, "buildNumber"), (12, True))

    def test_store_keeps_latin1_values(self):
        """Non-ASCII values of other keys survive a rewrite byte for byte."""
        path = self.tmp / "buildNumber.properties"
        path.write_bytes(b"owner=Ren\xe9\nbuildNumber=1\n")

        store.store(path, "buildNumber", 2, timestamp="1")

        self.assertIn(b"owner=Ren\xe9\n", path.read_bytes())
        self.assertEqual(store.read_properties(path)["owner"], "René")

    def test_load_unreadable_path_raises_storage_error(self):
        """A directory in place of the file is a storage error."""
        path = self.tmp / "buildNumber.properties"
        path.mkdir()

        with self.assertRaises(StorageError) as cm:
            store.load(path, "buildNumber")

        self.assertEqual(cm.exception.path, path)


class StoreWriteTests(TempDirTestCase):
    """Tests for store.store(), store.advance() and the properties format."""

    def test_store_writes_value_and_time(self):
        """store() writes the counter and the timestamp."""
        path = self.tmp / "buildNumber.properties"

        store.store(path, "buildNumber", 5, timestamp="1700000000")

        properties = store.read_properties(path)
        self.assertEqual(properties["buildNumber"], "5")
        self.assertEqual(properties["time"], "1700000000")
        self.assertTrue(path.read_text().startswith("#simple-buildnumber properties file\n"))

    def test_store_defaults_time_to_now(self):
        """Without a timestamp the current epoch seconds are used."""
        path = self.tmp / "buildNumber.properties"

        with patch("buildnumber.versioning.store.time.time", return_value=1234567890.7):
            store.store(path, "buildNumber", 1)

        self.assertEqual(store.read_properties(path)["time"], "1234567890")

    def test_store_preserves_other_keys(self):
        """Unrelated keys survive a rewrite."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("owner=ci\nbuildNumber=1\n")

        store.store(path, "buildNumber", 2, timestamp="1")

        properties = store.read_properties(path)
        self.assertEqual(properties["owner"], "ci")
        self.assertEqual(properties["buildNumber"], "2")

    def test_advance_increments_by_one(self):
        """advance() stores exactly the loaded value plus one."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("buildNumber=9\n")
        before, _ = store.load(path, "buildNumber")

        result = store.advance(path, "buildNumber", timestamp="1")

        self.assertEqual(result, before + 1)
        self.assertEqual(store.load(path, "buildNumber"), (before + 1, True))

    def test_advance_from_missing_file_starts_at_one(self):
        """A first run on a fresh counter stores 1."""
        path = self.tmp / "buildNumber.properties"

        self.assertEqual(store.advance(path, "buildNumber", timestamp="1"), 1)

    def test_advance_keep_does_not_rewrite(self):
        """With keep, the file content is left as it was."""
        path = self.tmp / "buildNumber.properties"
        path.write_text("buildNumber=4\n")

        result = store.advance(path, "buildNumber", keep=True)

        self.assertEqual(result, 4)
        self.assertEqual(path.read_text(), "buildNumber=4\n")

    def test_read_properties_separators_and_comments(self):
        """Comments are skipped and '=', ':' and whitespace separate keys."""
        path = self.tmp / "x.properties"
        path.write_text("# hash comment\n! bang comment\n\na=1\nb : 2\nc 3\n")

        self.assertEqual(store.read_properties(path), {"a": "1", "b": "2", "c": "3"})


# =============================================================================
# VERSION PARSING / COMPOSITION TESTS
# =============================================================================


class VersionPatternTests(TestCase):
    """Tests for version_pattern() and parse_version()."""

    def test_length_below_two_raises(self):
        """A version length under 2 is a configuration error."""
        with self.assertRaises(ConfigurationError):
            version_pattern(1)

    def test_parse_without_build(self):
        """'1.0-SNAPSHOT' has no build segment at length 3."""
        self.assertEqual(parse_version("1.0-SNAPSHOT", 3), ParsedVersion("1.0", None, "-SNAPSHOT"))

    def test_parse_with_build(self):
        """'1.0.7' carries build 7 and no suffix."""
        self.assertEqual(parse_version("1.0.7", 3), ParsedVersion("1.0", 7, None))

    def test_parse_length_two(self):
        """At length 2 the main part is a single number."""
        self.assertEqual(parse_version("5.3-SNAPSHOT", 2), ParsedVersion("5", 3, "-SNAPSHOT"))

    def test_parse_length_four(self):
        """At length 4 the main part has three numbers."""
        self.assertEqual(parse_version("1.2.3.44", 4), ParsedVersion("1.2.3", 44, None))

    def test_parse_too_many_segments_raises(self):
        """Too many segments for the configured length do not match."""
        with self.assertRaises(ParseError) as cm:
            parse_version("1.0.0.0", 3)

        self.assertIn("version.number.length", str(cm.exception))

    def test_parse_garbage_raises(self):
        """Non-numeric text does not match."""
        with self.assertRaises(ParseError):
            parse_version("abc", 3)

    def test_parse_unknown_suffix_raises(self):
        """Only the configured suffix marker is accepted."""
        with self.assertRaises(ParseError):
            parse_version("1.0.1-RC1", 3)


class ComposeVersionTests(TestCase):
    """Tests for compose_version()."""

    def test_increment_adds_one_and_forces_suffix(self):
        """Incrementing bumps the build and appends -SNAPSHOT."""
        self.assertEqual(compose_version(ParsedVersion("1.0", 4, None)), ("1.0.5-SNAPSHOT", 5))

    def test_increment_without_build_starts_at_zero(self):
        """A version with no build segment starts at 0."""
        self.assertEqual(compose_version(ParsedVersion("1.0", None, "-SNAPSHOT")), ("1.0.0-SNAPSHOT", 0))

    def test_keep_release_drops_suffix(self):
        """keep + release keeps the build and drops the suffix."""
        result = compose_version(ParsedVersion("1.0", 4, "-SNAPSHOT"), keep=True, release=True)

        self.assertEqual(result, ("1.0.4", 4))

    def test_keep_missing_build_omit(self):
        """Under keep with the 'omit' policy no build segment is added."""
        result = compose_version(ParsedVersion("1.0", None, None), keep=True)

        self.assertEqual(result, ("1.0-SNAPSHOT", None))

    def test_keep_missing_build_zero(self):
        """Under keep with the 'zero' policy the build segment starts at 0."""
        result = compose_version(ParsedVersion("1.0", None, None), keep=True, missing_build="zero")

        self.assertEqual(result, ("1.0.0-SNAPSHOT", 0))


# =============================================================================
# DESCRIPTOR UPDATE TESTS
# =============================================================================


class UpdateVersionTests(TempDirTestCase):
    """Tests for update_version() and the descriptor helpers."""

    def test_increment_rewrites_project_version_only(self):
        """The project version changes, the parent version does not."""
        pom = write_pom(self.tmp, "1.0.4-SNAPSHOT")

        result = update_version(pom)

        self.assertTrue(result.changed)
        self.assertEqual(result.old_version, "1.0.4-SNAPSHOT")
        self.assertEqual(result.new_version, "1.0.5-SNAPSHOT")
        self.assertEqual(result.build, 5)
        text = pom.read_text()
        self.assertIn("    <version>1.0.5-SNAPSHOT</version>\n", text)
        self.assertIn("        <version>9.9.9</version>\n", text)

    def test_release_adds_nothing(self):
        """A release increment has no suffix even if the old one had."""
        pom = write_pom(self.tmp, "2.1.0-SNAPSHOT")

        result = update_version(pom, release=True)

        self.assertEqual(result.new_version, "2.1.1")
        self.assertEqual(read_descriptor_version(pom), "2.1.1")

    def test_keep_release_keeps_build_number(self):
        """keep + release leaves the build number and drops the suffix."""
        pom = write_pom(self.tmp, "1.3.12-SNAPSHOT")

        result = update_version(pom, keep=True, release=True)

        self.assertEqual(result.new_version, "1.3.12")
        self.assertEqual(result.build, 12)

    def test_keep_is_idempotent(self):
        """A second keep run reports no change and leaves the file alone."""
        pom = write_pom(self.tmp, "1.0.3")
        update_version(pom, keep=True)
        content = pom.read_text()

        second = update_version(pom, keep=True)

        self.assertFalse(second.changed)
        self.assertEqual(pom.read_text(), content)

    def test_unchanged_version_is_not_rewritten(self):
        """No write happens when the composed version equals the stored one."""
        pom = write_pom(self.tmp, "1.0")

        with patch.object(Path, "write_text") as write_text:
            result = update_version(pom, keep=True, release=True)

        self.assertFalse(result.changed)
        write_text.assert_not_called()

    def test_malformed_version_leaves_file_untouched(self):
        """A version that does not match raises before any write."""
        pom = write_pom(self.tmp, "abc")
        content = pom.read_bytes()

        with self.assertRaises(ParseError):
            update_version(pom, segment_count=3)

        self.assertEqual(pom.read_bytes(), content)

    def test_length_below_two_raises_before_reading(self):
        """The length is validated before the descriptor is opened."""
        with self.assertRaises(ConfigurationError):
            update_version(self.tmp / "missing.xml", segment_count=1)

    def test_missing_descriptor_raises_storage_error(self):
        """A missing descriptor is a storage error."""
        with self.assertRaises(StorageError):
            update_version(self.tmp / "missing.xml")

    def test_version_element_not_found(self):
        """No version at the configured indent is a parse error."""
        pom = write_pom(self.tmp, "1.0.0")

        with self.assertRaises(ParseError) as cm:
            update_version(pom, indent_spaces=2)

        self.assertIn("Not Found", str(cm.exception))

    def test_ambiguous_version_element(self):
        """Two candidates at the same indent are a parse error."""
        pom = self.tmp / "pom.xml"
        pom.write_text("<project>\n    <version>1.0.0</version>\n    <version>2.0.0</version>\n</project>\n")

        with self.assertRaises(ParseError):
            update_version(pom)

    def test_custom_indent(self):
        """A descriptor indented with two spaces works with indent_spaces=2."""
        pom = self.tmp / "pom.xml"
        pom.write_text("<project>\n  <version>1.0.1</version>\n</project>\n")

        result = update_version(pom, indent_spaces=2)

        self.assertEqual(result.new_version, "1.0.2-SNAPSHOT")
        self.assertIn("  <version>1.0.2-SNAPSHOT</version>", pom.read_text())

    def test_rewrite_reports_no_change(self):
        """rewrite_descriptor_version() returns False for an identical version."""
        pom = write_pom(self.tmp, "1.0.1")

        self.assertFalse(rewrite_descriptor_version(pom, "1.0.1"))
        self.assertTrue(rewrite_descriptor_version(pom, "1.0.2"))

    def test_rewrite_keeps_declared_encoding(self):
        """A descriptor declared ISO-8859-1 is read and written in that encoding."""
        pom = self.tmp / "pom.xml"
        pom.write_bytes(
            b'<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            b"<project>\n"
            b"    <name>Caf\xe9</name>\n"
            b"    <version>1.0.1-SNAPSHOT</version>\n"
            b"</project>\n"
        )

        result = update_version(pom)

        self.assertEqual(result.new_version, "1.0.2-SNAPSHOT")
        data = pom.read_bytes()
        self.assertIn(b"<name>Caf\xe9</name>", data)
        self.assertIn(b"    <version>1.0.2-SNAPSHOT</version>\n", data)

    def test_undecodable_descriptor_raises_parse_error(self):
        """Bytes that do not match the declared encoding are a parse error."""
        pom = self.tmp / "pom.xml"
        original = b"<project>\n    <name>Caf\xe9</name>\n    <version>1.0.1</version>\n</project>\n"
        pom.write_bytes(original)

        with self.assertRaises(ParseError):
            update_version(pom)

        self.assertEqual(pom.read_bytes(), original)


class DeriveFinalNameTests(TestCase):
    """Tests for derive_final_name()."""

    def test_replaces_old_version(self):
        """The old version substring is replaced by the new one."""
        self.assertEqual(
            derive_final_name("app-1.0.0-SNAPSHOT.jar", "1.0.0-SNAPSHOT", "1.0.1"),
            "app-1.0.1.jar",
        )

    def test_only_first_occurrence_replaced(self):
        """Later occurrences are left as they are."""
        self.assertEqual(derive_final_name("a-1.0-b-1.0", "1.0", "2.0"), "a-2.0-b-1.0")

    def test_dots_are_literal(self):
        """The old version is matched literally, not as a pattern."""
        self.assertEqual(derive_final_name("app-1x0", "1.0", "2.0"), "app-1x0")

    def test_not_found_warns_and_keeps_name(self):
        """A name without the old version is returned unchanged with a warning."""
        with self.assertLogs("buildnumber.versioning.updater", level="WARNING") as logs:
            result = derive_final_name("custom-name", "1.0.0", "1.0.1")

        self.assertEqual(result, "custom-name")
        self.assertIn("finalName - Not Updated", logs.output[0])

    def test_none_name(self):
        """A project without a final name keeps None."""
        with self.assertLogs("buildnumber.versioning.updater", level="WARNING"):
            self.assertIsNone(derive_final_name(None, "1.0", "1.1"))


# =============================================================================
# GOAL TESTS
# =============================================================================


class IncrementGoalTests(TempDirTestCase):
    """Tests for the increment and keep goals."""

    def setUp(self):
        super().setUp()
        self.pom = write_pom(self.tmp, "1.0.4-SNAPSHOT")
        self.counter = self.tmp / "buildNumber.properties"

    def load_context(self):
        return ProjectContext.from_descriptor(self.pom)

    def test_increment_updates_descriptor_context_and_counter(self):
        """Increment bumps the version everywhere."""
        ctx = self.load_context()

        ran = IncrementGoal(ctx, create_options(self.tmp)).execute()

        self.assertTrue(ran)
        self.assertEqual(read_descriptor_version(self.pom), "1.0.5-SNAPSHOT")
        self.assertEqual(ctx.version, "1.0.5-SNAPSHOT")
        self.assertEqual(ctx.artifact_version, "1.0.5-SNAPSHOT")
        self.assertEqual(ctx.final_name, "app-1.0.5-SNAPSHOT")
        self.assertEqual(ctx.get_property("buildNumber"), "5")
        self.assertEqual(store.load(self.counter, "buildNumber"), (5, True))

    def test_run_once_skips_second_execution(self):
        """A second run in the same build is a no-op."""
        ctx = self.load_context()
        options = create_options(self.tmp)
        IncrementGoal(ctx, options).execute()

        ran = IncrementGoal(ctx, options).execute()

        self.assertFalse(ran)
        self.assertEqual(read_descriptor_version(self.pom), "1.0.5-SNAPSHOT")

    def test_run_once_checked_before_any_io(self):
        """The guard short-circuits even if the descriptor is missing."""
        ctx = ProjectContext(self.tmp, descriptor_path=self.tmp / "nope.xml", properties={"buildNumber": "3"})

        self.assertFalse(IncrementGoal(ctx, create_options(self.tmp)).execute())
        self.assertFalse(self.counter.exists())

    def test_run_once_disabled(self):
        """With run_once off the goal runs again."""
        ctx = self.load_context()
        options = create_options(self.tmp, run_once=False)
        IncrementGoal(ctx, options).execute()

        self.assertTrue(IncrementGoal(ctx, options).execute())
        self.assertEqual(read_descriptor_version(self.pom), "1.0.6-SNAPSHOT")

    def test_skip(self):
        """A skipped goal touches nothing."""
        content = self.pom.read_text()

        ran = IncrementGoal(self.load_context(), create_options(self.tmp, skip=True)).execute()

        self.assertFalse(ran)
        self.assertEqual(self.pom.read_text(), content)
        self.assertFalse(self.counter.exists())

    def test_keep_release(self):
        """keep + release drops the suffix and does not write the counter."""
        ctx = self.load_context()

        KeepGoal(ctx, create_options(self.tmp, release=True)).execute()

        self.assertEqual(ctx.version, "1.0.4")
        self.assertEqual(ctx.final_name, "app-1.0.4")
        self.assertEqual(ctx.get_property("buildNumber"), "4")
        self.assertNotIn("buildNumber", store.read_properties(self.counter))

    def test_keep_warns_when_counter_disagrees(self):
        """A counter out of step with the descriptor is reported."""
        self.counter.write_text("buildNumber=2\n")

        with self.assertLogs("buildnumber.versioning.goals", level="WARNING"):
            KeepGoal(self.load_context(), create_options(self.tmp)).execute()

    def test_keep_without_build_publishes_full_version(self):
        """Without a build segment the property carries the full version."""
        pom = write_pom(self.tmp, "2.0")
        ctx = ProjectContext.from_descriptor(pom)

        KeepGoal(ctx, create_options(self.tmp)).execute()

        self.assertEqual(ctx.get_property("buildNumber"), "2.0-SNAPSHOT")

    def test_final_base_name_property(self):
        """The derived final name is published when configured."""
        ctx = self.load_context()

        IncrementGoal(ctx, create_options(self.tmp, final_base_name_property="finalBase")).execute()

        self.assertEqual(ctx.get_property("finalBase"), "app-1.0.5-SNAPSHOT")

    def test_custom_final_name_left_unchanged(self):
        """A final name without the version is kept, with a warning."""
        pom = write_pom(self.tmp, "1.0.4-SNAPSHOT", final_name="myapp")
        ctx = ProjectContext.from_descriptor(pom)

        with self.assertLogs("buildnumber.versioning.updater", level="WARNING"):
            IncrementGoal(ctx, create_options(self.tmp)).execute()

        self.assertEqual(ctx.final_name, "myapp")
        self.assertEqual(ctx.version, "1.0.5-SNAPSHOT")


class CreateGoalTests(TempDirTestCase):
    """Tests for the counter-only create goal."""

    def test_create_publishes_incremented_counter(self):
        """create stores and publishes counter + 1."""
        ctx = ProjectContext(self.tmp)

        CreateGoal(ctx, create_options(self.tmp)).execute()

        self.assertEqual(ctx.get_property("buildNumber"), "1")
        self.assertEqual(store.load(self.tmp / "buildNumber.properties", "buildNumber"), (1, True))

    def test_create_keep_number(self):
        """With keep the counter is published but not incremented."""
        (self.tmp / "buildNumber.properties").write_text("buildNumber=7\n")
        ctx = ProjectContext(self.tmp)

        CreateGoal(ctx, create_options(self.tmp, keep=True)).execute()

        self.assertEqual(ctx.get_property("buildNumber"), "7")

    def test_create_runs_once(self):
        """A second create in the same build reuses the first number."""
        ctx = ProjectContext(self.tmp)
        options = create_options(self.tmp)
        CreateGoal(ctx, options).execute()
        CreateGoal(ctx, options).execute()

        self.assertEqual(ctx.get_property("buildNumber"), "1")


class CreateXmlGoalTests(TempDirTestCase):
    """Tests for the create-xml goal."""

    def test_missing_major_minor_raises(self):
        """The base version property is required."""
        pom = write_pom(self.tmp, "1.0-SNAPSHOT")
        ctx = ProjectContext.from_descriptor(pom)

        with self.assertLogs("buildnumber.versioning.goals", level="ERROR"):
            with self.assertRaises(ConfigurationError) as cm:
                CreateXmlGoal(ctx, create_options(self.tmp)).execute()

        self.assertIn("major.minor.version", str(cm.exception))
        self.assertFalse((self.tmp / "buildNumber.properties").exists())

    def test_composes_version_from_counter(self):
        """The version is major.minor + counter + suffix."""
        pom = write_pom(self.tmp, "1.0-SNAPSHOT", properties={"major.minor.version": "1.0"})
        ctx = ProjectContext.from_descriptor(pom)

        CreateXmlGoal(ctx, create_options(self.tmp)).execute()

        self.assertEqual(ctx.version, "1.0.1-SNAPSHOT")
        self.assertEqual(ctx.final_name, "app-1.0.1-SNAPSHOT")
        self.assertEqual(read_descriptor_version(pom), "1.0.1-SNAPSHOT")

    def test_release(self):
        """A release version has no suffix."""
        pom = write_pom(self.tmp, "1.0.4-SNAPSHOT", properties={"major.minor.version": "1.0"})
        (self.tmp / "buildNumber.properties").write_text("buildNumber=4\n")
        ctx = ProjectContext.from_descriptor(pom)

        CreateXmlGoal(ctx, create_options(self.tmp, release=True)).execute()

        self.assertEqual(read_descriptor_version(pom), "1.0.5")


class EvalGoalTests(TempDirTestCase):
    """Tests for the eval goal."""

    def test_default_format(self):
        """The default format joins project version and build number."""
        ctx = ProjectContext(self.tmp, version="1.2", properties={"buildNumber": "7"})

        ran = EvalGoal(ctx, create_options(self.tmp)).execute()

        self.assertTrue(ran)
        self.assertEqual(ctx.artifact_version, "1.2.7-SNAPSHOT")
        self.assertEqual(ctx.version, "1.2")

    def test_release_custom_format(self):
        """A custom format is used as is for a release."""
        ctx = ProjectContext(self.tmp, version="1.2", properties={"rev": "abc"})
        options = create_options(self.tmp, release=True, version_format="${project.version}+${rev}")

        EvalGoal(ctx, options).execute()

        self.assertEqual(ctx.artifact_version, "1.2+abc")

    def test_unresolved_placeholder_raises(self):
        """A placeholder with no value is a configuration error."""
        ctx = ProjectContext(self.tmp, version="1.2")

        with self.assertRaises(ConfigurationError):
            EvalGoal(ctx, create_options(self.tmp)).execute()


class RunGoalTests(TempDirTestCase):
    """Tests for run_goal()."""

    def test_unknown_goal(self):
        """An unknown goal name is a configuration error."""
        with self.assertRaises(ConfigurationError):
            run_goal("deploy", ProjectContext(self.tmp))

    def test_runs_named_goal(self):
        """Options are resolved from the settings and overrides."""
        ctx = ProjectContext(self.tmp)

        self.assertTrue(run_goal("create", ctx, properties_file=self.tmp / "n.properties"))
        self.assertEqual(ctx.get_property("buildNumber"), "1")


# =============================================================================
# SCENARIO TESTS (pytest fixtures)
# =============================================================================


def test_first_and_second_increment(snapshot_pom, make_options, counter_file):
    """A fresh project goes 1.0-SNAPSHOT -> 1.0.0-SNAPSHOT -> 1.0.1-SNAPSHOT."""
    first = ProjectContext.from_descriptor(snapshot_pom)
    IncrementGoal(first, make_options()).execute()

    assert first.version == "1.0.0-SNAPSHOT"
    assert store.read_properties(counter_file)["buildNumber"] == "0"

    second = ProjectContext.from_descriptor(snapshot_pom)
    IncrementGoal(second, make_options()).execute()

    assert second.version == "1.0.1-SNAPSHOT"
    assert store.read_properties(counter_file)["buildNumber"] == "1"


def test_keep_release_then_keep_again_is_stable(write_pom):
    """Releasing with keep twice gives the same version and no second change."""
    pom = write_pom("3.1.8-SNAPSHOT")

    first = update_version(pom, keep=True, release=True)
    second = update_version(pom, keep=True, release=True)

    assert first.changed
    assert first.new_version == "3.1.8"
    assert not second.changed
    assert second.new_version == "3.1.8"


def test_increment_publishes_to_context(context, make_options):
    """The goal reports version, artifact version and final name to the project."""
    IncrementGoal(context, make_options(final_base_name_property="finalBaseName")).execute()

    assert context.version == "1.0.0-SNAPSHOT"
    assert context.artifact_version == "1.0.0-SNAPSHOT"
    assert context.final_name == "app-1.0.0-SNAPSHOT"
    assert context.get_property("buildNumber") == "0"
    assert context.get_property("finalBaseName") == "app-1.0.0-SNAPSHOT"
