"""Configuration loading from environment variables and vita.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_LOCAL_DIR = Path.home() / ".vita" / "data"
_CONFIG_FILENAME = "vita.toml"


@dataclass
class DriveConfig:
    """Google Drive remote store configuration."""

    api_url: str = "https://www.googleapis.com/drive/v3"
    upload_url: str = "https://www.googleapis.com/upload/drive/v3"
    file_name: str = "health-tracker-data.json"
    access_token: str = ""
    timeout: int = 30


@dataclass
class SaveConfig:
    """Save coordinator tuning."""

    debounce: float = 1.0


@dataclass
class PinConfig:
    """Local PIN gate configuration."""

    salt: str = "ht-v1-"
    length: int = 4


@dataclass
class VitaConfig:
    """Top-level Vita configuration."""

    backend: str = "drive"
    drive: DriveConfig = field(default_factory=DriveConfig)
    save: SaveConfig = field(default_factory=SaveConfig)
    pin: PinConfig = field(default_factory=PinConfig)
    local_dir: Path = _DEFAULT_LOCAL_DIR
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> VitaConfig:
    """Load configuration from environment variables and optional vita.toml.

    Priority: environment variables > vita.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.vita/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".vita" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    drive_data = file_data.get("drive", {})
    save_data = file_data.get("save", {})
    pin_data = file_data.get("pin", {})
    drive_defaults = DriveConfig()

    config = VitaConfig(
        backend=os.getenv("VITA_BACKEND", file_data.get("backend", "drive")),
        drive=DriveConfig(
            api_url=drive_data.get("api_url", drive_defaults.api_url),
            upload_url=drive_data.get("upload_url", drive_defaults.upload_url),
            file_name=os.getenv("VITA_FILE_NAME", drive_data.get("file_name", drive_defaults.file_name)),
            access_token=os.getenv("VITA_DRIVE_TOKEN", drive_data.get("access_token", "")),
            timeout=int(os.getenv("VITA_DRIVE_TIMEOUT", drive_data.get("timeout", 30))),
        ),
        save=SaveConfig(
            debounce=float(os.getenv("VITA_DEBOUNCE", save_data.get("debounce", 1.0))),
        ),
        pin=PinConfig(
            salt=os.getenv("VITA_PIN_SALT", pin_data.get("salt", "ht-v1-")),
            length=int(pin_data.get("length", 4)),
        ),
        local_dir=Path(
            os.getenv("VITA_LOCAL_DIR", file_data.get("local_dir", str(_DEFAULT_LOCAL_DIR)))
        ).expanduser(),
        log_level=os.getenv("VITA_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
