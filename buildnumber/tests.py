"""
Tests for the command line runner.

Logging setup is patched out so the global logging configuration of the
test session is left alone.
"""

from unittest.mock import patch

import pytest

from buildnumber.cli import main
from buildnumber.versioning import store
from buildnumber.versioning.updater import read_descriptor_version


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep main() from reconfiguring logging."""
    with patch("buildnumber.cli.configure_logging") as configure:
        yield configure


def test_increment_prints_new_version(snapshot_pom, counter_file, capsys):
    """The increment goal rewrites the pom and prints the new version."""
    code = main(["increment", "--descriptor", str(snapshot_pom)])

    assert code == 0
    assert capsys.readouterr().out.strip() == "1.0.0-SNAPSHOT"
    assert read_descriptor_version(snapshot_pom) == "1.0.0-SNAPSHOT"
    assert store.load(counter_file, "buildNumber") == (0, True)


def test_keep_release(write_pom, capsys):
    """keep --release drops the suffix and keeps the build."""
    pom = write_pom("1.0.9-SNAPSHOT")

    assert main(["keep", "--release", "--descriptor", str(pom)]) == 0
    assert capsys.readouterr().out.strip() == "1.0.9"


def test_length_option(write_pom, capsys):
    """--length changes the number of version segments."""
    pom = write_pom("4.2.0.6")

    assert main(["increment", "--length", "4", "--release", "--descriptor", str(pom)]) == 0
    assert capsys.readouterr().out.strip() == "4.2.0.7"


def test_custom_properties_file(snapshot_pom, project_dir, capsys):
    """--properties-file and --property-name choose where the counter goes."""
    code = main([
        "increment",
        "--descriptor", str(snapshot_pom),
        "--properties-file", "build/rev.properties",
        "--property-name", "revision",
    ])

    assert code == 0
    assert store.load(project_dir / "build" / "rev.properties", "revision") == (0, True)


def test_create_xml_with_define(snapshot_pom, capsys):
    """-D sets project properties such as major.minor.version."""
    code = main(["create-xml", "-D", "major.minor.version=1.0", "--descriptor", str(snapshot_pom)])

    assert code == 0
    assert capsys.readouterr().out.strip() == "1.0.1-SNAPSHOT"


def test_eval_prints_artifact_version(write_pom, capsys):
    """eval prints the artifact version, not the project version."""
    pom = write_pom("1.2")

    code = main(["eval", "-D", "buildNumber=5", "--release", "--descriptor", str(pom)])

    assert code == 0
    assert capsys.readouterr().out.strip() == "1.2.5"
    assert read_descriptor_version(pom) == "1.2"


def test_skip_prints_nothing(snapshot_pom, capsys):
    """A skipped goal exits cleanly without output."""
    assert main(["increment", "--skip", "--descriptor", str(snapshot_pom)]) == 0
    assert capsys.readouterr().out == ""
    assert read_descriptor_version(snapshot_pom) == "1.0-SNAPSHOT"


def test_parse_error_exits_with_one(write_pom, caplog, capsys):
    """A malformed version is reported and the exit status is 1."""
    pom = write_pom("abc")

    assert main(["increment", "--descriptor", str(pom)]) == 1
    assert "No valid version text found: abc" in caplog.text
    assert read_descriptor_version(pom) == "abc"


def test_missing_descriptor_exits_with_one(project_dir):
    """A missing pom is a storage error."""
    assert main(["increment", "--descriptor", str(project_dir / "pom.xml")]) == 1


def test_invalid_define_exits_with_one(snapshot_pom):
    """A -D without '=' is rejected."""
    assert main(["create", "-D", "oops", "--descriptor", str(snapshot_pom)]) == 1


def test_unknown_goal_is_rejected_by_argparse(snapshot_pom):
    """argparse refuses goals that do not exist."""
    with pytest.raises(SystemExit):
        main(["deploy", "--descriptor", str(snapshot_pom)])


def test_logging_configured_from_settings(snapshot_pom, no_logging_setup):
    """main() applies the selected settings module's logging."""
    main(["increment", "--settings", "buildnumber.settings.development", "--descriptor", str(snapshot_pom)])

    settings = no_logging_setup.call_args.args[0]
    assert settings.__name__ == "buildnumber.settings.development"


def test_create_prints_build_number(snapshot_pom, capsys):
    """create prints the counter rather than the project version."""
    assert main(["create", "--descriptor", str(snapshot_pom)]) == 0
    assert capsys.readouterr().out.strip() == "1"


def test_descriptor_defaults_to_setting(project_dir, monkeypatch, capsys):
    """Without --descriptor the settings' descriptor name is used in the working directory."""
    import buildnumber.settings.base as base

    (project_dir / "project.xml").write_text(
        "<project>\n    <artifactId>app</artifactId>\n    <version>2.0.3</version>\n</project>\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(project_dir)
    monkeypatch.setattr(base, "DESCRIPTOR_FILE_NAME", "project.xml")

    assert main(["keep", "--settings", "buildnumber.settings.base"]) == 0
    assert capsys.readouterr().out.strip() == "2.0.3-SNAPSHOT"
    assert read_descriptor_version(project_dir / "project.xml") == "2.0.3-SNAPSHOT"


def test_interpolated_final_name_is_updated(write_pom, caplog):
    """A finalName built from ${project.*} references follows the new version."""
    pom = write_pom("1.4.0", final_name="${project.artifactId}-${project.version}")

    assert main(["increment", "--final-name-property", "finalBaseName", "--descriptor", str(pom)]) == 0
    assert "Not Updated" not in caplog.text
