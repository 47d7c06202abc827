"""Student Records Service configuration."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .static_assets import DEFAULT_STATIC_DIR

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"

# Environment variable -> config key
ENV_MAPPINGS = {
    "HOST": "host",
    "PORT": "port",
    "STUDENTS_DATA_FILE": "data_file",
    "STUDENTS_STATIC_DIR": "static_dir",
    "LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    """Configuration validation error"""

    pass


@dataclass
class ServiceConfig:
    """
    Configuration for the Student Records Service.

    Priority: environment variables > config file > defaults
    """

    host: str = "0.0.0.0"
    port: int = 3000
    data_file: Path = field(default_factory=lambda: Path("students.json"))
    static_dir: Path = DEFAULT_STATIC_DIR
    log_level: str = "INFO"

    def __post_init__(self):
        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid port: {self.port!r}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"Port out of range: {self.port}")

        self.data_file = Path(self.data_file).expanduser()
        self.static_dir = Path(self.static_dir).expanduser()
        self.log_level = str(self.log_level).upper()

    @property
    def url(self) -> str:
        """Local URL the server answers on."""
        return f"http://localhost:{self.port}/"


def _load_file_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        with open(config_path) as f:
            file_config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config file {config_path}: {e}")
        return {}

    if not isinstance(file_config, dict):
        logger.warning(f"Ignoring config file {config_path}: expected a mapping")
        return {}
    return {k: v for k, v in file_config.items() if k in ENV_MAPPINGS.values()}


def load_config(config_path: Path | str | None = None) -> ServiceConfig:
    """
    Load configuration from config file and environment.

    Args:
        config_path: YAML file to read. Defaults to $STUDENTS_CONFIG or
            config/config.yaml under the working directory.

    Raises:
        ConfigError: a value fails validation
    """
    if config_path is None:
        config_path = os.environ.get("STUDENTS_CONFIG") or DEFAULT_CONFIG_PATH

    values = _load_file_config(Path(config_path))

    for env_key, config_key in ENV_MAPPINGS.items():
        value = os.environ.get(env_key)
        if value:
            values[config_key] = value

    return ServiceConfig(**values)
