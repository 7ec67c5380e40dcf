from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from gjallarhorn import __version__
from gjallarhorn.cli import cli
from gjallarhorn.cli_utils import ExitCode, exit_code_for, truncate
from gjallarhorn.rules import Severity

CLASSIC_AND_PASSWORD = """\
resource "aws_db_security_group" "legacy" {
  name = "legacy"
}

resource "openstack_compute_instance_v2" "web" {
  admin_pass = "N0tSoS3cretP4ssw0rd"
}
"""

UNENCRYPTED_DATABASE = """\
resource "aws_db_instance" "db" {
  engine = "mysql"
}
"""

CLEAN = """\
resource "openstack_compute_instance_v2" "web" {
  name = "web"
}
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    for name, content in (("infra", CLASSIC_AND_PASSWORD), ("database", UNENCRYPTED_DATABASE), ("clean", CLEAN)):
        (tmp_path / name).mkdir()
        (tmp_path / name / "main.tf").write_text(content, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == f"gjallarhorn {__version__}"


def test_rules_as_json(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["rules", "--format", "json"])

    assert result.exit_code == 0
    rules = json.loads(result.stdout)
    assert len(rules) == 26
    assert {"id", "long_id", "severity", "formats"} <= set(rules[0])

    result = runner.invoke(cli, ["rules", "--format", "json", "--provider", "openstack"])
    assert len(json.loads(result.stdout)) == 5


def test_rules_table(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["rules", "--no-color"])

    assert result.exit_code == 0
    assert "AVD-AWS-0081" in result.output
    assert "Total: 26 rule(s)" in result.output


def test_critical_findings_exit_code(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(cli, ["scan", "infra", "--format", "json"])

    assert result.exit_code == ExitCode.CRITICAL_FINDINGS
    report = json.loads(result.stdout)
    assert report["summary"]["total"] == 2
    assert {r["rule_id"] for r in report["results"]} == {"AVD-AWS-0081", "AVD-OPNSTK-0001"}


def test_fail_on_threshold(runner: CliRunner, workspace: Path) -> None:
    # the unencrypted database has HIGH and MEDIUM findings but nothing CRITICAL
    assert runner.invoke(cli, ["scan", "database"]).exit_code == ExitCode.SUCCESS
    assert runner.invoke(cli, ["scan", "database", "--fail-on", "high"]).exit_code == ExitCode.HIGH_FINDINGS
    assert runner.invoke(cli, ["scan", "database", "--fail-on", "low"]).exit_code == ExitCode.HIGH_FINDINGS

    result = runner.invoke(cli, ["scan", "database", "--fail-on", "low", "--exclude-rule", "AVD-AWS-0080"])
    assert result.exit_code == ExitCode.MEDIUM_FINDINGS


def test_clean_scan_passes(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(cli, ["scan", "clean", "--no-color"])

    assert result.exit_code == ExitCode.SUCCESS
    assert "PASSED - No findings" in result.output


def test_table_output_lists_findings(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(cli, ["scan", "infra", "--no-color"])

    assert result.exit_code == ExitCode.CRITICAL_FINDINGS
    assert "AVD-AWS-0081" in result.output
    assert "AVD-OPNSTK-0001" in result.output


def test_report_written_to_file(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(cli, ["scan", "infra", "--format", "json", "--output", "report.json"])

    assert result.exit_code == ExitCode.CRITICAL_FINDINGS
    report = json.loads((workspace / "report.json").read_text(encoding="utf-8"))
    assert report["summary"]["by_severity"]["CRITICAL"] == 1


def test_invalid_config_is_a_usage_error(runner: CliRunner, workspace: Path) -> None:
    (workspace / ".gjallarhorn.yml").write_text("workers: 0\n", encoding="utf-8")

    result = runner.invoke(cli, ["scan", "infra"])

    assert result.exit_code == ExitCode.ERROR
    assert "workers must be at least 1" in result.output


def test_written_baseline_silences_accepted_findings(runner: CliRunner, workspace: Path) -> None:
    first = runner.invoke(cli, ["scan", "infra", "--write-baseline", "accepted.json", "--no-color"])
    assert first.exit_code == ExitCode.CRITICAL_FINDINGS
    assert (workspace / "accepted.json").is_file()

    second = runner.invoke(cli, ["scan", "infra", "--ignore-file", "accepted.json", "--format", "json"])
    assert second.exit_code == ExitCode.SUCCESS
    report = json.loads(second.stdout)
    assert report["summary"]["total"] == 0
    assert report["summary"]["ignored"] == 2


@pytest.mark.parametrize(
    "summary, fail_on, cancelled, expected",
    [
        ({"CRITICAL": 0, "HIGH": 0, "MEDIUM": 0, "LOW": 0}, Severity.LOW, False, ExitCode.SUCCESS),
        ({"CRITICAL": 1, "HIGH": 2, "MEDIUM": 0, "LOW": 0}, Severity.CRITICAL, False, ExitCode.CRITICAL_FINDINGS),
        ({"CRITICAL": 0, "HIGH": 2, "MEDIUM": 0, "LOW": 0}, Severity.CRITICAL, False, ExitCode.SUCCESS),
        ({"CRITICAL": 0, "HIGH": 0, "MEDIUM": 3, "LOW": 1}, Severity.MEDIUM, False, ExitCode.MEDIUM_FINDINGS),
        ({"CRITICAL": 0, "HIGH": 0, "MEDIUM": 0, "LOW": 1}, Severity.LOW, False, ExitCode.LOW_FINDINGS),
        ({"CRITICAL": 5, "HIGH": 0, "MEDIUM": 0, "LOW": 0}, None, False, ExitCode.SUCCESS),
        ({"CRITICAL": 5, "HIGH": 0, "MEDIUM": 0, "LOW": 0}, Severity.CRITICAL, True, ExitCode.TIMEOUT),
    ],
)
def test_exit_code_for(summary, fail_on, cancelled, expected) -> None:
    assert exit_code_for(summary, fail_on, cancelled) == expected


def test_truncate() -> None:
    assert truncate("short", 10) == "short"
    assert truncate("a-very-long-filename.tf", 10) == "a-very-l.."
    assert truncate(None, 5) == ""
