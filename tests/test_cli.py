import json
import sys

from click.testing import CliRunner

from stampfix import log
from stampfix.cli import logs, main
from stampfix.config import PROJECT_CONFIG
from stampfix.timestamps import NS_PER_SECOND, FileTimestamps, read_timestamps


def invoke(args, env=None):
    return CliRunner().invoke(main, args, env=env)


def test_pins_tree_and_exits_zero(tmp_path):
    a = tmp_path / "a.txt"
    a.write_text("a")
    before = read_timestamps(str(a))

    result = invoke([str(tmp_path), sys.executable, "-c", f"open({str(a)!r}, 'a').write('x')"])

    assert result.exit_code == 0, result.output
    assert read_timestamps(str(a)) == before
    assert "fixing timestamp for:" in result.output


def test_source_date_epoch_from_environment(tmp_path):
    result = invoke(
        ["--cd", str(tmp_path), sys.executable, "-c", "open('c.txt', 'w')"],
        env={"SOURCE_DATE_EPOCH": "1609459200"},
    )

    assert result.exit_code == 0, result.output
    expected = 1609459200 * NS_PER_SECOND
    assert read_timestamps(str(tmp_path / "c.txt")) == FileTimestamps.uniform(expected)


def test_unparseable_source_date_epoch_falls_back_to_zero(tmp_path):
    result = invoke(
        ["--cd", str(tmp_path), sys.executable, "-c", "open('c.txt', 'w')"],
        env={"SOURCE_DATE_EPOCH": "yesterday"},
    )

    assert result.exit_code == 0, result.output
    assert read_timestamps(str(tmp_path / "c.txt")) == FileTimestamps.uniform(0)


def test_command_options_are_passed_through(tmp_path):
    result = invoke(
        ["--cd", str(tmp_path), sys.executable, "-c", "import sys; open(sys.argv[1], 'w')", "--version"]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "--version").exists()


def test_cd_default_comes_from_project_config(tmp_path):
    (tmp_path / PROJECT_CONFIG).write_text(json.dumps({"cd": True}))

    result = invoke([str(tmp_path), sys.executable, "-c", "open('made.txt', 'w')"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "made.txt").exists()


def test_custom_epoch_var_from_config(tmp_path):
    (tmp_path / PROJECT_CONFIG).write_text(json.dumps({"cd": True, "epoch_var": "BUILD_EPOCH"}))

    result = invoke(
        [str(tmp_path), sys.executable, "-c", "open('c.txt', 'w')"],
        env={"BUILD_EPOCH": "86400", "SOURCE_DATE_EPOCH": "1"},
    )

    assert result.exit_code == 0, result.output
    assert read_timestamps(str(tmp_path / "c.txt")) == FileTimestamps.uniform(86400 * NS_PER_SECOND)


def test_failing_command_exits_non_zero_without_restore(tmp_path):
    a = tmp_path / "a.txt"
    a.write_text("a")
    before = read_timestamps(str(a))

    result = invoke(
        [str(tmp_path), sys.executable, "-c", f"open({str(a)!r}, 'a').write('x'); raise SystemExit(2)"]
    )

    assert result.exit_code == 1
    assert "command failed" in result.output
    assert "Resetting timestamps" not in result.output
    assert read_timestamps(str(a)).mtime_ns != before.mtime_ns


def test_invalid_directory_exits_non_zero(tmp_path):
    result = invoke([str(tmp_path / "missing"), "true"])

    assert result.exit_code == 1
    assert "not a valid directory" in result.output


def test_missing_command_is_a_usage_error(tmp_path):
    result = invoke([str(tmp_path)])
    assert result.exit_code == 2


def test_no_audit_flag(tmp_path):
    result = invoke(["--no-audit", str(tmp_path), sys.executable, "-c", "pass"])

    assert result.exit_code == 0, result.output
    assert not log.LOGS_FILE.exists()


def test_logs_lists_recorded_runs(tmp_path):
    invoke([str(tmp_path), sys.executable, "-c", "pass"])
    invoke([str(tmp_path), sys.executable, "-c", "raise SystemExit(1)"])

    result = CliRunner().invoke(logs, ["--all"], env={"COLUMNS": "200"})

    assert result.exit_code == 0, result.output
    assert "pinned" in result.output
    assert "command failed" in result.output


def test_logs_filters_to_current_directory(tmp_path, monkeypatch):
    invoke([str(tmp_path), sys.executable, "-c", "pass"])
    other = tmp_path / "other"
    other.mkdir()
    monkeypatch.chdir(other)

    result = CliRunner().invoke(logs, [])

    assert result.exit_code == 0
    assert "No logs found." in result.output


def test_unwritable_audit_log_still_exits_zero(tmp_path, unwritable_log):
    result = invoke(["--cd", str(tmp_path), sys.executable, "-c", "open('n.txt', 'w')"])

    assert result.exit_code == 0, result.output
    assert read_timestamps(str(tmp_path / "n.txt")) == FileTimestamps.uniform(0)
    assert "cannot write audit log" in result.output


def test_unwritable_audit_log_still_reports_command_failure(tmp_path, unwritable_log):
    result = invoke([str(tmp_path), sys.executable, "-c", "raise SystemExit(3)"], env={"COLUMNS": "500"})

    assert result.exit_code == 1
    assert "exit status 3" in result.output


def test_version_comes_from_package_metadata():
    from importlib.metadata import version

    result = CliRunner().invoke(main, ["--version"])

    assert result.exit_code == 0
    assert version("stampfix") in result.output
