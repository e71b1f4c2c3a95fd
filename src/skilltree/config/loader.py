import os
from pathlib import Path

import yaml


def find_config_file(cli_path: Path | None = None) -> Path | None:
    """Find the YAML config file using the search path.

    Search order:
    1. CLI-provided path (if given)
    2. SKILLTREE_CONFIG_PATH environment variable
    3. ./skilltree.yaml (current directory)
    4. ~/.config/skilltree/config.yaml (user config)

    Returns None if no config file is found.
    """
    if cli_path:
        if cli_path.exists():
            return cli_path
        raise FileNotFoundError(f"Config file not found: {cli_path}")

    env_path = os.environ.get("SKILLTREE_CONFIG_PATH")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {path}")

    cwd_config = Path.cwd() / "skilltree.yaml"
    if cwd_config.exists():
        return cwd_config

    user_config = Path.home() / ".config" / "skilltree" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def load_yaml_config(path: Path) -> dict:
    """Load and parse a YAML config file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return data or {}


def generate_default_config() -> dict:
    """Generate a default YAML config structure with documentation."""
    return {
        "environment": "production",
        "storage": {"data_dir": "", "cache_dir": ""},
        "model": {"provider": "gemini", "name": "gemini-2.5-flash-lite"},
        "tree": {
            "max_depth": 1,
            "max_root_children": 6,
            "max_child_children": 4,
            "practice_items": 3,
            "max_concurrency": 1,
        },
        "providers": {"ollama": {"base_url": "http://localhost:11434"}},
    }


def clean_config(data: dict) -> dict:
    """Drop empty-string values so model defaults apply in their place."""
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, dict):
            cleaned[key] = clean_config(value)
        elif value != "":
            cleaned[key] = value
    return cleaned
