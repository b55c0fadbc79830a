"""Helper utilities"""
import re
from typing import Any, Dict

PLACEHOLDER_PATTERN = re.compile(r'<([^<>]+)>')


def sanitize_filename(name: str) -> str:
    """Sanitize string for use as filename"""
    return re.sub(r'[<>:"/\\|?*@\s]+', '_', name).strip('_') or 'unnamed'


def deep_get(dictionary: Dict, keys: str, default: Any = None) -> Any:
    """Get nested dictionary value using dot notation"""
    value = dictionary

    for key in keys.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries, override wins"""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def substitute_placeholders(template: str, values: Dict[str, str]) -> str:
    """Replace ``<name>`` with values[name]; unknown placeholders stay as written"""
    return PLACEHOLDER_PATTERN.sub(lambda m: str(values.get(m.group(1), m.group(0))), template)
