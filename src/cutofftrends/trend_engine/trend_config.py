"""
Trend engine settings (platformdirs + JSON).

Persisted items (schema v1):
- palette_size: number of colors the presentation layer cycles through;
  ComparisonEntry.color_index is taken modulo this.
- min_trend_points: rounds a series needs before it counts as a trend
  (and before it may be pinned for comparison).
- percent_decimals: rounding for delta percentages.

Behavior:
- If the config file is missing or unreadable -> defaults are used
- If schema_version mismatches -> defaults (or keep loaded, see load())
- Unknown keys are ignored with warnings

Design:
- TrendConfig dataclass holds JSON-friendly data and is what the engine consumes
- TrendConfigStore provides the explicit load/save API
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from cutofftrends.utils.logging import get_logger

logger = get_logger(__name__)

# Increment on a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

DEFAULT_PALETTE_SIZE = 8
DEFAULT_MIN_TREND_POINTS = 2
DEFAULT_PERCENT_DECIMALS = 1


@dataclass
class TrendConfig:
    """Engine settings. Values are validated on construction."""
    palette_size: int = DEFAULT_PALETTE_SIZE
    min_trend_points: int = DEFAULT_MIN_TREND_POINTS
    percent_decimals: int = DEFAULT_PERCENT_DECIMALS
    schema_version: int = SCHEMA_VERSION

    def __post_init__(self) -> None:
        if int(self.palette_size) < 1:
            raise ValueError(f"palette_size must be >= 1, got {self.palette_size!r}")
        if int(self.min_trend_points) < 2:
            raise ValueError(f"min_trend_points must be >= 2, got {self.min_trend_points!r}")
        if int(self.percent_decimals) < 0:
            raise ValueError(f"percent_decimals must be >= 0, got {self.percent_decimals!r}")

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "palette_size": self.palette_size,
            "min_trend_points": self.min_trend_points,
            "percent_decimals": self.percent_decimals,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "TrendConfig":
        """
        Tolerant loader:
        - ignores unknown keys
        - missing or invalid values fall back to defaults
        - out-of-range values are clamped
        """

        def _int(key: str, default: int, lo: int) -> int:
            if key not in d:
                return default
            try:
                return max(lo, int(d[key]))
            except (TypeError, ValueError, OverflowError):
                logger.warning(f"Invalid value for '{key}' in trend config: {d[key]!r}, using {default}")
                return default

        known_keys = {"schema_version", "palette_size", "min_trend_points", "percent_decimals"}
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in trend config, ignoring")

        return cls(
            palette_size=_int("palette_size", DEFAULT_PALETTE_SIZE, 1),
            min_trend_points=_int("min_trend_points", DEFAULT_MIN_TREND_POINTS, 2),
            percent_decimals=_int("percent_decimals", DEFAULT_PERCENT_DECIMALS, 0),
            schema_version=_int("schema_version", -1, -1),
        )


class TrendConfigStore:
    """
    Manager for loading/saving TrendConfig to disk.
    """

    def __init__(self, *, path: Path, data: Optional[TrendConfig] = None):
        self.path = path
        self.data = data if data is not None else TrendConfig()

    @staticmethod
    def default_config_path(
        app_name: str = "cutofftrends",
        filename: str = "trend_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/cutofftrends/trend_config.json
        Linux:   ~/.config/cutofftrends/trend_config.json
        Windows: %APPDATA%\\cutofftrends\\trend_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "cutofftrends",
        filename: str = "trend_config.json",
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
    ) -> "TrendConfigStore":
        """
        Load config from disk.

        If the file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded values but overwrite schema_version
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename)
        default_data = TrendConfig(schema_version=schema_version)

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(parsed, dict):
                logger.warning(f"Trend config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = TrendConfig.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"Trend config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    return cls(path=path, data=default_data)
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"Trend config file not found at {path}, using defaults")
            return cls(path=path, data=default_data)
        except json.JSONDecodeError as e:
            logger.warning(f"Trend config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading trend config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data.to_json_dict(), indent=2), encoding="utf-8")
            logger.info(f"Saved trend config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving trend config to {self.path}: {e}")
            raise
