import copy
import os
from typing import Any, Dict, Optional

import yaml

CONFIG_NAME = 'hogan-config.yaml'

DEFAULTS: Dict[str, Any] = {
    'views': 'views',
    'static': 'public',
    'static_url': '/',
    'server': {
        'host': '0.0.0.0',
        'port': 3000,
    },
    'templates': {
        'extension': '.mustache',
        'watch': True,
        'debounce_ms': 250,
    },
    'routes': {},
    'logging': {
        'level': 'INFO',
        'console': True,
    },
}


def get_base_dir():
    """Get the base directory of the project checkout."""
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from file, filling in defaults for missing settings."""
    # Define config locations upfront
    base_dir = get_base_dir()
    config_locations = [
        os.path.join(base_dir, 'config', CONFIG_NAME),  # Project config directory
        os.path.join(os.getcwd(), 'config', CONFIG_NAME),  # Config directory under current directory
        os.path.join(os.getcwd(), CONFIG_NAME),         # Current directory
        os.path.join(os.path.dirname(__file__), CONFIG_NAME),  # Package directory
    ]

    if not config_path:
        # Try locations in order
        for loc in config_locations:
            if os.path.exists(loc):
                config_path = loc
                break

    if not config_path or not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found in any of the expected locations: {config_locations}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")

    return _merge(DEFAULTS, config)
