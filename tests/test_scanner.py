from __future__ import annotations

import json
from pathlib import Path

import pytest

from gjallarhorn.config import ScanConfig
from gjallarhorn.diagnostics import DiagnosticKind
from gjallarhorn.providers import Provider
from gjallarhorn.rules import Severity
from gjallarhorn.scanner import Scanner

from conftest import source_text

INFRA = """
resource "aws_db_security_group" "legacy" {
  name = "legacy"
}

resource "openstack_compute_instance_v2" "web" {
  name       = "web"
  admin_pass = "N0tSoS3cretP4ssw0rd"
}
"""


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "infra").mkdir()
    (tmp_path / "infra" / "main.tf").write_text(source_text(INFRA), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_scan_reports_located_findings(workspace: Path) -> None:
    report = Scanner().scan_paths(["infra"])

    by_rule = {r.rule_id: r for r in report.results}
    assert set(by_rule) == {"AVD-AWS-0081", "AVD-OPNSTK-0001"}
    assert by_rule["AVD-AWS-0081"].range.start_line == 1
    assert by_rule["AVD-OPNSTK-0001"].range.start_line == 7
    assert report.rules_evaluated == 26
    assert report.files_read == 1
    assert report.resources == {
        "aws.rds.classic.db_security_groups": 1,
        "openstack.compute.instances": 1,
    }
    assert report.severity_summary["CRITICAL"] == 1
    assert report.has_findings_at_or_above(Severity.HIGH)


def test_configuration_selects_rules(workspace: Path) -> None:
    scanner = Scanner(ScanConfig(providers=[Provider.OPENSTACK]))
    report = scanner.scan_paths(["infra"])

    assert [r.rule_id for r in report.results] == ["AVD-OPNSTK-0001"]
    assert report.rules_evaluated == 5

    report = Scanner(ScanConfig(minimum_severity=Severity.CRITICAL)).scan_paths(["infra"])
    assert [r.rule_id for r in report.results] == ["AVD-AWS-0081"]

    report = Scanner(ScanConfig(exclude_rules=["aws-rds-no-classic-resources"])).scan_paths(["infra"])
    assert "AVD-AWS-0081" not in {r.rule_id for r in report.results}


def test_ignore_file_in_working_directory(workspace: Path) -> None:
    (workspace / ".gjallarhorn-ignore").write_text("rule:AVD-AWS-0081  # migrating next quarter\n", encoding="utf-8")

    report = Scanner().scan_paths(["infra"])

    assert [r.rule_id for r in report.results] == ["AVD-OPNSTK-0001"]
    assert len(report.ignored) == 1
    assert report.ignored[0]["reason"] == "migrating next quarter"
    assert report.ignore_stats["by_rule"] == {"rule:AVD-AWS-0081": 1}


def test_parse_errors_do_not_stop_the_scan(workspace: Path) -> None:
    (workspace / "broken").mkdir()
    (workspace / "broken" / "main.tf").write_text('resource "x" "y" {\n', encoding="utf-8")

    report = Scanner().scan_paths(["infra", "broken"])

    assert len(report.results) == 2
    assert [d.kind for d in report.diagnostics] == [DiagnosticKind.PARSE]


def test_report_serializes_to_json(workspace: Path) -> None:
    report = Scanner().scan_paths(["infra"])
    data = json.loads(json.dumps(report.to_dict()))

    assert data["summary"]["total"] == 2
    assert data["summary"]["by_severity"]["CRITICAL"] == 1
    assert data["summary"]["rules_evaluated"] == 26
    result = next(r for r in data["results"] if r["rule_id"] == "AVD-OPNSTK-0001")
    assert result["long_id"] == "openstack-compute-no-plaintext-password"
    assert result["locations"][0]["start_line"] == 7
    assert result["locations"][0]["filename"].endswith("main.tf")


def test_unreadable_documents_are_diagnostics(workspace: Path) -> None:
    (workspace / "stack.yaml").write_text(
        "Resources:\n  Bucket:\n    Type: AWS::S3::Bucket\n    Properties:\n      BucketName: 2020-13-45\n",
        encoding="utf-8",
    )
    (workspace / "deep").mkdir()
    (workspace / "deep" / "main.tf").write_text("locals {\n  x = " + "[" * 3000 + "]" * 3000 + "\n}\n", encoding="utf-8")

    report = Scanner().scan_paths(["infra", "stack.yaml", "deep"])

    assert {r.rule_id for r in report.results} == {"AVD-AWS-0081", "AVD-OPNSTK-0001"}
    assert [d.kind for d in report.diagnostics] == [DiagnosticKind.PARSE, DiagnosticKind.PARSE]
