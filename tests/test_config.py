from __future__ import annotations

from pathlib import Path

import pytest

from gjallarhorn.config import ScanConfig, find_config_file, load_config, parse_provider
from gjallarhorn.exceptions import ConfigError
from gjallarhorn.providers import Provider
from gjallarhorn.rules import Severity


def test_defaults_without_a_config_file(tmp_path: Path) -> None:
    config = load_config(directories=[str(tmp_path)])

    assert config == ScanConfig()
    assert config.source is None
    assert find_config_file([str(tmp_path)]) is None


def test_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / ".gjallarhorn.yml"
    path.write_text(
        "workers: 4\n"
        "timeout: 30\n"
        "minimum_severity: medium\n"
        "providers: [aws]\n"
        "exclude_rules:\n"
        "  - AVD-AWS-0089\n"
        "exclude_paths: examples/*\n",
        encoding="utf-8",
    )

    config = load_config(directories=[str(tmp_path)])

    assert config.workers == 4
    assert config.timeout == 30.0
    assert config.minimum_severity == Severity.MEDIUM
    assert config.providers == [Provider.AWS]
    assert config.exclude_rules == ["AVD-AWS-0089"]
    assert config.exclude_paths == ["examples/*"]
    assert config.source == str(path)


def test_json_config_is_read_by_the_same_loader(tmp_path: Path) -> None:
    path = tmp_path / "scan.json"
    path.write_text('{"include_rules": ["AVD-AWS-0081"], "ignore_file": "accepted.json"}', encoding="utf-8")

    config = load_config(str(path))

    assert config.include_rules == ["AVD-AWS-0081"]
    assert config.ignore_file == "accepted.json"


@pytest.mark.parametrize(
    "content",
    [
        "workers: 0\n",
        "timeout: -5\n",
        "workers: many\n",
        "minimum_severity: urgent\n",
        "providers: [gcp]\n",
        "colour: true\n",
        "- just\n- a list\n",
        "workers: [unclosed\n",
    ],
)
def test_invalid_configs_raise(tmp_path: Path, content: str) -> None:
    path = tmp_path / ".gjallarhorn.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


def test_explicit_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yml"))


def test_command_line_overrides() -> None:
    config = ScanConfig(workers=2, exclude_rules=["AVD-AWS-0089"])

    merged = config.merged(workers=None, timeout=10.0, exclude_rules=(), include_rules=("AVD-AWS-0081",))

    assert merged.workers == 2
    assert merged.timeout == 10.0
    assert merged.exclude_rules == ["AVD-AWS-0089"]
    assert merged.include_rules == ["AVD-AWS-0081"]
    assert config.timeout is None


def test_parse_provider() -> None:
    assert parse_provider(" OpenStack ") == Provider.OPENSTACK
    with pytest.raises(ConfigError):
        parse_provider("azure")
