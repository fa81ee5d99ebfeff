import json
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

YAML_SUFFIXES = ('.yaml', '.yml')
JSON_SUFFIXES = ('.json',)


def load_config_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML or JSON generation config. Raises FileNotFoundError for a
    missing file and ValueError for an unknown suffix or unparsable content.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise ValueError(f"Unsupported file format: {suffix or file_path.name}")

    with open(file_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f) if suffix in YAML_SUFFIXES else json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Cannot parse {file_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {file_path} must be a mapping")
    logger.debug(f"Read configuration file {file_path}")
    return data


def format_duration(seconds: float) -> str:
    """Human readable duration: 850ms, 4.0s, 3m 5s, 1h 2m"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    return f"{int(seconds // 3600)}h {int(seconds % 3600 // 60)}m"


def truncate_value(value: Any, length: int = 60) -> str:
    """Shorten a value for console and log output"""
    text = "NULL" if value is None else str(value)
    if len(text) <= length:
        return text
    return text[:length - 3] + "..."
