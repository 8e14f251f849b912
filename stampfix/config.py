import json
from pathlib import Path

from stampfix.errors import ConfigError
from stampfix.timestamps import SOURCE_DATE_EPOCH

PROJECT_CONFIG = ".stampfix.json"
GLOBAL_CONFIG_FILE = Path.home() / ".stampfix" / "config.json"

DEFAULT_CONFIG = {
    "cd": False,
    "epoch_var": SOURCE_DATE_EPOCH,
    "audit_log": True,
}


def load_global_config():
    """Load ~/.stampfix/config.json. Missing or broken files count as empty."""
    if GLOBAL_CONFIG_FILE.exists():
        try:
            data = json.loads(GLOBAL_CONFIG_FILE.read_text())
        except (json.JSONDecodeError, OSError):
            return {}
        if isinstance(data, dict):
            return data
    return {}


def find_config(start):
    """Walk up from start to find .stampfix.json, like git finds .git."""
    current = Path(start).resolve()
    for parent in [current, *current.parents]:
        config_path = parent / PROJECT_CONFIG
        if config_path.is_file():
            return config_path
    return None


def load_config(directory):
    # Merge order: defaults → global config → project .stampfix.json
    config = {**DEFAULT_CONFIG, **load_global_config()}

    config_path = find_config(directory)
    if config_path:
        try:
            raw = json.loads(config_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path} must contain a JSON object")
        config.update(raw)

    if not isinstance(config.get("epoch_var"), str) or not config["epoch_var"]:
        raise ConfigError(f"epoch_var must be a non-empty string, got {config.get('epoch_var')!r}")

    return {key: config[key] for key in DEFAULT_CONFIG}
