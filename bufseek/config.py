"""
Configuration management for bufseek.

The configuration is stored as a TOML file in the data directory, next to
the recent-buffers cache. It sets the history capacity, the cache file
name, which identity schemes count as remote, and the picker key bindings
an editor integration should register.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

# tomli_w for writing TOML (tomllib is read-only)
import tomli_w

from .recency import DEFAULT_MAX_ENTRIES
from .recency_store import CACHE_FILENAME


CONFIG_FILENAME = "bufseek.toml"
CONFIG_VERSION = 1
DATA_DIR_ENV = "BUFSEEK_DATA_DIR"

DEFAULT_REMOTE_SCHEMES = ("rsync", "scp")
DEFAULT_KEYMAPS = {
    "fuzzy": "<leader>fz",
    "exact": "<leader>gb",
    "recent": "<leader>rb",
}


def get_default_data_dir() -> Path:
    """Data directory from BUFSEEK_DATA_DIR, else ~/.bufseek."""
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".bufseek"


@dataclass
class SeekConfig:
    """Complete bufseek configuration."""
    path: Path
    version: int = CONFIG_VERSION
    max_entries: int = DEFAULT_MAX_ENTRIES
    cache_file: str = CACHE_FILENAME
    remote_schemes: tuple[str, ...] = DEFAULT_REMOTE_SCHEMES
    keymaps: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_KEYMAPS))

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def cache_path(self) -> Path:
        """Path to the recent-buffers JSON cache."""
        return self.path / self.cache_file

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def load_config(data_dir: Path) -> SeekConfig:
    """
    Load configuration from a data directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = data_dir / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config {config_path}: {e}") from e

    history = data.get("history", {})

    # Validate version
    version = history.get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    max_entries = history.get("max_entries", DEFAULT_MAX_ENTRIES)
    if not isinstance(max_entries, int) or isinstance(max_entries, bool) or max_entries < 1:
        raise ValueError(f"history.max_entries must be a positive integer: {max_entries!r}")

    cache_file = history.get("cache_file", CACHE_FILENAME)
    if not isinstance(cache_file, str) or not cache_file:
        raise ValueError(f"history.cache_file must be a file name: {cache_file!r}")

    schemes = data.get("remote", {}).get("schemes", list(DEFAULT_REMOTE_SCHEMES))
    if not isinstance(schemes, list) or not all(isinstance(s, str) and s for s in schemes):
        raise ValueError(f"remote.schemes must be a list of scheme names: {schemes!r}")

    overrides = data.get("keymaps", {})
    if not isinstance(overrides, dict) or not all(isinstance(v, str) for v in overrides.values()):
        raise ValueError(f"keymaps must be a table of key strings: {overrides!r}")
    keymaps = dict(DEFAULT_KEYMAPS)
    keymaps.update(overrides)

    return SeekConfig(
        path=data_dir,
        version=version,
        max_entries=max_entries,
        cache_file=cache_file,
        remote_schemes=tuple(s.lower() for s in schemes),
        keymaps=keymaps,
    )


def save_config(config: SeekConfig) -> None:
    """
    Save configuration to the data directory.

    Creates the directory if it doesn't exist.
    """
    # Ensure directory exists
    config.path.mkdir(parents=True, exist_ok=True)

    data = {
        "history": {
            "version": config.version,
            "max_entries": config.max_entries,
            "cache_file": config.cache_file,
        },
        "remote": {
            "schemes": list(config.remote_schemes),
        },
        "keymaps": dict(config.keymaps),
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(data_dir: Path | None = None) -> SeekConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    data_dir = Path(data_dir) if data_dir is not None else get_default_data_dir()
    config_path = data_dir / CONFIG_FILENAME

    if config_path.exists():
        return load_config(data_dir)
    else:
        config = SeekConfig(path=data_dir)
        save_config(config)
        return config
