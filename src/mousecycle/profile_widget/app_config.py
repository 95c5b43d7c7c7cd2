# src/mousecycle/profile_widget/app_config.py
"""
App config persistence for mousecycle (platformdirs + JSON).

Persisted items (schema v1):
- data_dir: folder holding the raw CSV recordings
- files: "<sex>_<metric>" -> CSV filename
- default_metric: metric shown on page load
- padding: [low, high] multipliers for the value axis

View state (filters, zoom) is never persisted.

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.data_source import DEFAULT_FILES, dataset_key, dataset_key_str
from mousecycle.profile_widget.profile import Metric, Sex
from mousecycle.profile_widget.view_controller import DEFAULT_PADDING

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

DEFAULT_DATA_DIR = "data"


def _default_files() -> Dict[str, str]:
    return {dataset_key_str(k): v for k, v in DEFAULT_FILES.items()}


@dataclass
class AppConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly: primitives, lists, dicts.
    """
    schema_version: int = SCHEMA_VERSION
    data_dir: str = DEFAULT_DATA_DIR
    files: Dict[str, str] = field(default_factory=_default_files)
    default_metric: str = Metric.TEMPERATURE.value
    padding: list[float] = field(default_factory=lambda: list(DEFAULT_PADDING))

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "data_dir": self.data_dir,
            "files": dict(self.files),
            "default_metric": self.default_metric,
            "padding": list(self.padding),
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "AppConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates partially missing or invalid values
        """
        schema_version = int(d.get("schema_version", -1))
        data_dir = str(d.get("data_dir", DEFAULT_DATA_DIR))

        files = _default_files()
        files_raw = d.get("files")
        if isinstance(files_raw, dict):
            for key, filename in files_raw.items():
                try:
                    dataset_key(str(key))
                except ValueError:
                    logger.warning(f"Unknown dataset key '{key}' in app config, ignoring")
                    continue
                files[str(key)] = str(filename)
        elif files_raw is not None:
            logger.warning("files is not a dict, using default file names")

        default_metric = str(d.get("default_metric", Metric.TEMPERATURE.value))
        try:
            Metric(default_metric)
        except ValueError:
            logger.warning(f"Unknown default_metric '{default_metric}', using temperature")
            default_metric = Metric.TEMPERATURE.value

        padding = list(DEFAULT_PADDING)
        padding_raw = d.get("padding")
        if padding_raw is not None:
            try:
                lo, hi = (float(v) for v in padding_raw)
                padding = [lo, hi]
            except (TypeError, ValueError):
                logger.warning(f"Invalid padding {padding_raw!r}, using {padding}")

        known_keys = {"schema_version", "data_dir", "files", "default_metric", "padding"}
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in app config, ignoring")

        return cls(
            schema_version=schema_version,
            data_dir=data_dir,
            files=files,
            default_metric=default_metric,
            padding=padding,
        )


class AppConfig:
    """
    Manager for loading/saving AppConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[AppConfigData] = None):
        self.path = path
        self.data = data if data is not None else AppConfigData()

    # -----------------------------
    # Construction / persistence
    # -----------------------------
    @staticmethod
    def default_config_path(
        app_name: str = "mousecycle",
        filename: str = "mousecycle_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/mousecycle/mousecycle_config.json
        Linux:   ~/.config/mousecycle/mousecycle_config.json
        Windows: %APPDATA%\\mousecycle\\mousecycle_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "mousecycle",
        filename: str = "mousecycle_config.json",
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "AppConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = AppConfigData(schema_version=schema_version)

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                logger.warning(f"App config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = AppConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"App config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    return cls(path=path, data=default_data)
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"App config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                try:
                    cfg.save()
                except OSError:
                    logger.warning(f"Continuing with unsaved default app config for {path}")
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"App config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Error reading app config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved app config to {self.path}")
        except Exception as e:
            logger.error(f"Error saving app config to {self.path}: {e}")
            raise

    def get_data_dir(self, base_dir: Optional[Path] = None) -> Path:
        """Data directory; relative paths resolve against base_dir (default: cwd)."""
        d = Path(self.data.data_dir).expanduser()
        if not d.is_absolute() and base_dir is not None:
            d = base_dir / d
        return d

    def get_files(self) -> dict[tuple[Sex, Metric], str]:
        """(sex, metric) -> CSV filename."""
        return {dataset_key(k): v for k, v in self.data.files.items()}

    def get_default_metric(self) -> Metric:
        return Metric(self.data.default_metric)

    def set_default_metric(self, metric: Metric | str) -> None:
        self.data.default_metric = Metric(metric).value

    def get_padding(self) -> tuple[float, float]:
        lo, hi = self.data.padding
        return float(lo), float(hi)
