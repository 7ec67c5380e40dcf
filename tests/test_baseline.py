from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from gjallarhorn.baseline import Baseline, IgnoreRule, _parse_pattern, generate_result_hash
from gjallarhorn.exceptions import ConfigError
from gjallarhorn.rules import Result
from gjallarhorn.rules.aws.rds.no_classic_resources import check_no_classic_resources
from gjallarhorn.rules.openstack.networking.describe_security_group import check_describe_security_group
from gjallarhorn.types import Metadata, Range


def make_result(rule, filename: str = "infra/main.tf", line: int = 3) -> Result:
    return Result(
        rule=rule.definition,
        message="finding",
        flagged=(Metadata(Range(filename, line, line)),),
    )


@pytest.fixture
def results():
    return [
        make_result(check_no_classic_resources, "infra/main.tf", 3),
        make_result(check_describe_security_group, "network/groups.tf", 10),
    ]


def test_pattern_prefixes() -> None:
    assert _parse_pattern("rule:AVD-AWS-0081").rule == "AVD-AWS-0081"
    assert _parse_pattern("path:examples/*").path == "examples/*"
    assert _parse_pattern("severity:LOW").severity == "LOW"
    assert _parse_pattern("hash:abc123").finding_hash == "abc123"
    assert _parse_pattern("describe").pattern == "describe"


def test_rule_patterns_match_ids_and_long_ids(results) -> None:
    assert IgnoreRule(rule="AVD-AWS-0081").matches(results[0])
    assert IgnoreRule(rule="aws-rds-*").matches(results[0])
    assert not IgnoreRule(rule="aws-rds-*").matches(results[1])


def test_path_and_severity_patterns(results) -> None:
    assert IgnoreRule(path="network/*").matches(results[1])
    assert not IgnoreRule(path="network/*").matches(results[0])
    assert IgnoreRule(severity="low").matches(results[1])
    assert not IgnoreRule(rule="AVD-AWS-0081", severity="LOW").matches(results[0])


def test_expired_rules_no_longer_match(results) -> None:
    expired = IgnoreRule(rule="AVD-AWS-0081", expires="2020-01-01")

    assert expired.is_expired(datetime(2021, 1, 1))
    assert not expired.matches(results[0])
    assert not IgnoreRule(rule="AVD-AWS-0081", expires="2999-01-01").is_expired()


def test_text_ignore_file(tmp_path: Path, results) -> None:
    path = tmp_path / ".gjallarhorn-ignore"
    path.write_text(
        "# accepted findings\n"
        "\n"
        "rule:AVD-OPNSTK-0005   # descriptions are managed by the platform team\n",
        encoding="utf-8",
    )

    baseline = Baseline.load(directory=str(tmp_path))
    kept, ignored, stats = baseline.filter_results(results)

    assert baseline.file_path == str(path)
    assert [r.rule_id for r in kept] == ["AVD-AWS-0081"]
    assert ignored[0]["reason"] == "descriptions are managed by the platform team"
    assert stats == {"total": 2, "ignored": 1, "by_rule": {"rule:AVD-OPNSTK-0005": 1}}


def test_missing_default_file_gives_an_empty_baseline(tmp_path: Path, results) -> None:
    baseline = Baseline.load(directory=str(tmp_path))

    assert baseline.rules == []
    assert baseline.filter_results(results)[0] == results


def test_explicit_ignore_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        Baseline.load(str(tmp_path / "missing-ignore"))


def test_hashes_round_trip_through_a_saved_baseline(tmp_path: Path, results) -> None:
    baseline = Baseline()
    accepted = baseline.add_result(results[0])
    written = baseline.save(str(tmp_path / "accepted.json"))

    data = json.loads(Path(written).read_text(encoding="utf-8"))
    assert data["rules"][0]["hash"] == accepted

    reloaded = Baseline.load(written)
    kept, ignored, _ = reloaded.filter_results(results)
    assert kept == [results[1]]
    assert ignored[0]["rule"] == f"hash:{accepted}"


def test_result_hash_depends_on_location() -> None:
    first = make_result(check_no_classic_resources, "infra/main.tf", 3)
    moved = make_result(check_no_classic_resources, "infra/main.tf", 4)

    assert generate_result_hash(first) == generate_result_hash(make_result(check_no_classic_resources))
    assert generate_result_hash(first) != generate_result_hash(moved)
    assert len(generate_result_hash(first)) == 16
