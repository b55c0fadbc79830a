"""Configuration management"""
import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from stepwright.core.exceptions import ConfigError
from stepwright.utils.helpers import deep_get, deep_merge
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'project': {'name': 'stepwright'},
    'browser': {
        'type': 'chromium',
        'headless': True,
        'slow_mo': 0,
        'viewport': {'width': 1920, 'height': 1080},
        'ignore_https_errors': True,
        'video': False,
        'videos_dir': 'reports/videos',
    },
    'run': {
        'features': 'features/**/*.feature',
        'tags': None,
        'exclude_tag': '@ignore',
        'tags_env_var': 'TAGS',
    },
    'steps': {'modules': []},
    'reports': {'screenshots_dir': 'reports/screenshots'},
    'logging': {'level': 'INFO'},
}


class ConfigManager:
    """Manages configuration loading and merging"""

    def __init__(self, config_path: str, environment: str):
        self.config_path = Path(config_path)
        self.environment = environment
        self.config: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """Load and merge configuration files"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        # Load main config
        if self.config_path.exists():
            self.config = deep_merge(self.config, self._read_yaml(self.config_path))
        else:
            logger.warning(f"Config file not found, using defaults: {self.config_path}")

        # Load environment specific config
        env_config_path = self.config_path.parent / 'environments' / f'{self.environment}.yaml'
        if env_config_path.exists():
            env_config = self._read_yaml(env_config_path)

            # Handle overrides section specially
            if 'overrides' in env_config:
                overrides = env_config.pop('overrides')
                self._apply_overrides(self.config, overrides or {})

            # Then merge the rest of env config
            self.config = deep_merge(self.config, env_config)
        else:
            logger.debug(f"Environment config not found: {env_config_path}")

        # Process environment variables
        self.config = self._process_env_vars(self.config)

        logger.info(f"Configuration loaded for environment: {self.environment}")
        return self.config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping")
        return data

    def _apply_overrides(self, base: Dict, overrides: Dict) -> None:
        """Apply overrides from environment config to base config"""
        for section, values in overrides.items():
            if section in base and isinstance(values, dict) and isinstance(base[section], dict):
                for key, value in values.items():
                    base[section][key] = value
            else:
                base[section] = values

    def _process_env_vars(self, config: Any) -> Any:
        """Replace ${VAR} with environment variables"""
        if isinstance(config, dict):
            return {k: self._process_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._process_env_vars(item) for item in config]
        elif isinstance(config, str) and config.startswith('${') and config.endswith('}'):
            var_name = config[2:-1]
            return os.environ.get(var_name, config)
        else:
            return config

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get configuration value by key (supports dot notation)"""
        return deep_get(self.config, key, default)
