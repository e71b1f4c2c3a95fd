from pathlib import Path

from skilltree.config.loader import (
    clean_config,
    find_config_file,
    generate_default_config,
    load_yaml_config,
)
from skilltree.config.models import (
    AppConfig,
    ModelConfig,
    OllamaConfig,
    ProvidersConfig,
    StorageConfig,
    TreeConfig,
)

__all__ = [
    "Config",
    "AppConfig",
    "ModelConfig",
    "StorageConfig",
    "TreeConfig",
    "OllamaConfig",
    "ProvidersConfig",
    "find_config_file",
    "load_yaml_config",
    "load_config",
    "generate_default_config",
    "set_config",
]


def load_config(path: Path | None = None) -> AppConfig:
    """Build an AppConfig from the first config file found, or defaults."""
    config_path = find_config_file(path)
    if config_path is None:
        return AppConfig()
    return AppConfig.model_validate(clean_config(load_yaml_config(config_path)))


class ConfigProxy:
    """Proxy for the global configuration that allows runtime updates."""

    def __init__(self):
        self._config = load_config()

    def __getattr__(self, name):
        """Proxy attribute access to the underlying config."""
        return getattr(self._config, name)

    def get(self) -> AppConfig:
        """Return the wrapped configuration."""
        return self._config

    def set(self, config: AppConfig) -> None:
        """Replace the current configuration."""
        self._config = config


# Create the global Config instance
Config = ConfigProxy()


def set_config(config: AppConfig) -> None:
    """Set the global configuration programmatically.

    This allows library users to configure skilltree without needing
    a YAML file.

    Example:
        >>> from skilltree.config import set_config, AppConfig
        >>> set_config(AppConfig(model={"provider": "openai", "name": "gpt-4o"}))
    """
    Config.set(config)
