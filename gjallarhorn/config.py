# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                         ᚺᛁᛗᛁᚾᛒᛃᛟᚱᚷ • HIMINBJÖRG
#                     Where the Watch Keeps Its Standing Orders
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   Scan configuration, read from the first of
#
#     .gjallarhorn.yml  .gjallarhorn.yaml  .gjallarhorn.json
#
#   found in the working directory (JSON is read by the same YAML loader).
#   Command line options are layered on top with ScanConfig.merged().
#
#     workers: 4
#     timeout: 60
#     minimum_severity: MEDIUM
#     providers: [aws]
#     include_rules: []
#     exclude_rules: [AVD-AWS-0089, aws-s3-enable-versioning]
#     exclude_paths: ["examples/*"]
#     ignore_file: .gjallarhorn-ignore
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from gjallarhorn.exceptions import ConfigError
from gjallarhorn.providers import Provider
from gjallarhorn.rules.definition import Severity

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".gjallarhorn.yml", ".gjallarhorn.yaml", ".gjallarhorn.json")

_LIST_KEYS = ("include_rules", "exclude_rules", "exclude_paths")


@dataclass(frozen=True)
class ScanConfig:
    workers: Optional[int] = None
    timeout: Optional[float] = None
    minimum_severity: Optional[Severity] = None
    include_rules: List[str] = field(default_factory=list)
    exclude_rules: List[str] = field(default_factory=list)
    providers: List[Provider] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    ignore_file: Optional[str] = None
    source: Optional[str] = None  # file this configuration was read from

    def __post_init__(self):
        if self.workers is not None and self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    def merged(self, **overrides: Any) -> "ScanConfig":
        """
        A copy with the given fields replaced.

        None and empty sequences mean "not given on the command line" and keep
        the configured value.
        """
        changes = {}
        for name, value in overrides.items():
            if value is None or (isinstance(value, (list, tuple)) and not value):
                continue
            if name in _LIST_KEYS or name == "providers":
                value = list(value)
            changes[name] = value
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: Optional[str] = None) -> "ScanConfig":
        known = {f.name for f in dataclasses.fields(cls)} - {"source"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(map(str, unknown))}")

        values: Dict[str, Any] = {"source": source}
        if data.get("workers") is not None:
            values["workers"] = _as_int(data["workers"], "workers")
        if data.get("timeout") is not None:
            values["timeout"] = _as_float(data["timeout"], "timeout")
        if data.get("minimum_severity") is not None:
            try:
                values["minimum_severity"] = Severity.parse(str(data["minimum_severity"]))
            except ValueError as e:
                raise ConfigError(str(e)) from None
        for key in _LIST_KEYS:
            if data.get(key) is not None:
                values[key] = _as_str_list(data[key], key)
        if data.get("providers") is not None:
            values["providers"] = [parse_provider(p) for p in _as_str_list(data["providers"], "providers")]
        if data.get("ignore_file") is not None:
            values["ignore_file"] = str(data["ignore_file"])
        return cls(**values)


def parse_provider(value: str) -> Provider:
    try:
        return Provider(value.strip().lower())
    except ValueError:
        raise ConfigError(
            f"Unknown provider '{value}', expected one of: {', '.join(p.value for p in Provider)}"
        ) from None


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"{key} must be an integer")
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got '{value}'") from None


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got '{value}'") from None


def _as_str_list(value: Any, key: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    return [str(item) for item in value]


def find_config_file(directories: Sequence[str] = (".",)) -> Optional[Path]:
    for directory in directories:
        for name in CONFIG_FILENAMES:
            candidate = Path(directory) / name
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Optional[str] = None, directories: Sequence[str] = (".",)) -> ScanConfig:
    """
    Load the scan configuration.

    An explicit path must exist. Without one the first config file found in
    directories is used, or the defaults when there is none.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found: {path}")
    else:
        config_path = find_config_file(directories)
        if config_path is None:
            logger.debug("No configuration file found, using defaults")
            return ScanConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from None
    except OSError as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from None

    if not isinstance(raw, Mapping):
        raise ConfigError(f"{config_path}: configuration root must be a mapping")

    logger.info(f"Loaded configuration from {config_path}")
    return ScanConfig.from_mapping(raw, source=str(config_path))
