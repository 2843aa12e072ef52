"""Analysis configuration management helpers."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def _str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass(frozen=True)
class AnalyticsConfig:
    """Immutable configuration object loaded from env or files."""

    enable_time_series: bool = True
    # builds the SQLite recorder when no sink is injected
    persist_time_series: bool = False
    reject_mixed_currency: bool = False
    default_currency: str = "USD"
    time_series_db_path: str = "analytics.db"

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        defaults = cls()
        return cls(
            enable_time_series=_str_to_bool(
                os.getenv("ANALYTICS_ENABLE_TIME_SERIES"), defaults.enable_time_series
            ),
            persist_time_series=_str_to_bool(
                os.getenv("ANALYTICS_PERSIST_TIME_SERIES"),
                defaults.persist_time_series,
            ),
            reject_mixed_currency=_str_to_bool(
                os.getenv("ANALYTICS_REJECT_MIXED_CURRENCY"),
                defaults.reject_mixed_currency,
            ),
            default_currency=os.getenv(
                "ANALYTICS_DEFAULT_CURRENCY", defaults.default_currency
            ),
            time_series_db_path=os.getenv(
                "ANALYTICS_TIME_SERIES_DB_PATH", defaults.time_series_db_path
            ),
        )

    @classmethod
    def from_file(cls, path: str) -> "AnalyticsConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ValueError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._merge_with_defaults(data))

    def validate(self) -> None:
        if not _CURRENCY_PATTERN.match(self.default_currency):
            raise ValueError("default_currency must be a 3-letter uppercase code")
        if not self.time_series_db_path:
            raise ValueError("time_series_db_path must not be empty")

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        defaults = cls()
        return {
            "enable_time_series": data.get(
                "enable_time_series", defaults.enable_time_series
            ),
            "persist_time_series": data.get(
                "persist_time_series", defaults.persist_time_series
            ),
            "reject_mixed_currency": data.get(
                "reject_mixed_currency", defaults.reject_mixed_currency
            ),
            "default_currency": data.get("default_currency", defaults.default_currency),
            "time_series_db_path": str(
                data.get("time_series_db_path", defaults.time_series_db_path)
            ),
        }

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
