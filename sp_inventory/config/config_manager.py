"""Configuration management for the SharePoint inventory."""

import os
import yaml
from typing import Dict, Any, Optional
from .config_validator import ConfigValidator
from ..core.models import RunConfiguration


class ConfigManager:
    """Manages configuration loading and validation for inventory runs."""

    DEFAULT_CONFIG_LOCATIONS = [
        "config.yaml",
        "config.yml",
        os.path.expanduser("~/.sp-inventory/config.yaml"),
        os.path.expanduser("~/.sp-inventory/config.yml"),
        "/etc/sp-inventory/config.yaml",
        "/etc/sp-inventory/config.yml"
    ]

    # RunConfiguration field -> (section, key)
    FIELD_SOURCES = {
        'tenant_name': ('tenant', 'name'),
        'client_id': ('tenant', 'client_id'),
        'client_secret': ('tenant', 'client_secret'),
        'username': ('tenant', 'username'),
        'password': ('tenant', 'password'),
        'site_filter': ('inventory', 'site_filter'),
        'include_personal_sites': ('inventory', 'include_personal_sites'),
        'register_consent': ('inventory', 'register_consent'),
        'console_output': ('output', 'console'),
        'persist_to_disk': ('output', 'persist'),
        'log_directory': ('output', 'log_directory'),
        'execution_log': ('output', 'execution_log'),
        'failures_file': ('output', 'failures_file'),
        'files_file': ('output', 'files_file'),
        'sites_file': ('output', 'sites_file'),
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations.
        """
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}
        self.loaded_from: Optional[str] = None
        self.validator = ConfigValidator()

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file.

        A missing file is only an error when a path was given explicitly;
        otherwise the defaults are used.

        Returns:
            Dictionary containing configuration data.

        Raises:
            FileNotFoundError: If an explicit config file cannot be found.
            ValueError: If config file is invalid.
        """
        config_file = self._find_config_file()
        self.config_data = {}

        if config_file:
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    self.config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in config file {config_file}: {e}")
            except OSError as e:
                raise ValueError(f"Error reading config file {config_file}: {e}")
            self.loaded_from = config_file

        # Validate configuration
        self.validator.validate(self.config_data)

        # Set defaults
        self._set_defaults()

        return self.config_data

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in default locations.

        Returns:
            Path to configuration file, or None if none exists.

        Raises:
            FileNotFoundError: If an explicit config path does not exist.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")

        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location

        return None

    def _set_defaults(self):
        """Set default values for optional configuration parameters."""
        run_defaults = RunConfiguration()
        defaults = {
            'tenant': {
                'name': run_defaults.tenant_name,
            },
            'inventory': {
                'site_filter': run_defaults.site_filter,
                'include_personal_sites': run_defaults.include_personal_sites,
                'register_consent': run_defaults.register_consent,
            },
            'output': {
                'console': run_defaults.console_output,
                'persist': run_defaults.persist_to_disk,
                'log_directory': run_defaults.log_directory,
                'execution_log': run_defaults.execution_log,
                'failures_file': run_defaults.failures_file,
                'files_file': run_defaults.files_file,
                'sites_file': run_defaults.sites_file,
            },
            'logging': {
                'level': 'WARNING',
                'file': None,
            },
        }

        # Merge defaults with existing config
        for section, section_defaults in defaults.items():
            if not self.config_data.get(section):
                self.config_data[section] = {}
            for key, value in section_defaults.items():
                if key not in self.config_data[section]:
                    self.config_data[section][key] = value

    def build_run_configuration(self, overrides: Optional[Dict[str, Any]] = None) -> RunConfiguration:
        """Build the settings for one run.

        Args:
            overrides: RunConfiguration field values, typically from the
                command line. ``None`` values are ignored.

        Returns:
            RunConfiguration combining defaults, file values and overrides.
        """
        if not self.config_data:
            self.load_config()

        values = {}
        for field_name, (section, key) in self.FIELD_SOURCES.items():
            value = self.config_data.get(section, {}).get(key)
            if value is not None:
                values[field_name] = value

        for field_name, value in (overrides or {}).items():
            if value is not None:
                values[field_name] = value

        self.validator.validate_run_values(values)
        return RunConfiguration(**values)

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.

        Returns:
            Logging configuration dictionary.
        """
        return self.config_data.get('logging', {})
