"""Configuration validation for the SharePoint inventory."""

from typing import Dict, Any


class ConfigValidator:
    """Validates inventory configuration."""

    SECTIONS = ['tenant', 'inventory', 'output', 'logging']
    BOOLEAN_FIELDS = {
        'inventory': ['include_personal_sites', 'register_consent'],
        'output': ['console', 'persist'],
    }
    FILE_NAME_FIELDS = ['execution_log', 'failures_file', 'files_file', 'sites_file']
    RUN_BOOLEAN_FIELDS = ['console_output', 'persist_to_disk', 'include_personal_sites',
                          'register_consent']
    LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration data.

        Args:
            config: Configuration dictionary to validate.

        Raises:
            ValueError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping of sections")

        self._validate_structure(config)

        for section, fields in self.BOOLEAN_FIELDS.items():
            for key in fields:
                value = (config.get(section) or {}).get(key)
                if value is not None and not isinstance(value, bool):
                    raise ValueError(f"{section}.{key} must be true or false, got {value!r}")

        output = config.get('output') or {}
        for key in self.FILE_NAME_FIELDS:
            if key in output:
                self._validate_file_name(f"output.{key}", output[key])

        level = (config.get('logging') or {}).get('level')
        if level is not None and str(level).upper() not in self.LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {self.LOG_LEVELS}, got {level!r}")

    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate basic configuration structure.

        Args:
            config: Configuration dictionary.

        Raises:
            ValueError: If unknown sections are present or a section is not a mapping.
        """
        unknown_sections = [section for section in config if section not in self.SECTIONS]
        if unknown_sections:
            raise ValueError(f"Unknown configuration sections: {unknown_sections}")

        for section in self.SECTIONS:
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{section}' must be a mapping")

    def validate_run_values(self, values: Dict[str, Any]) -> None:
        """Validate merged values before they become a RunConfiguration.

        Raises:
            ValueError: If a toggle is not boolean or a file name is invalid.
        """
        for key in self.RUN_BOOLEAN_FIELDS:
            if key in values and not isinstance(values[key], bool):
                raise ValueError(f"{key} must be true or false, got {values[key]!r}")

        for key in self.FILE_NAME_FIELDS:
            if key in values:
                self._validate_file_name(key, values[key])

    @staticmethod
    def _validate_file_name(name: str, value: Any) -> None:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{name} must be a non-empty file name")
        if '/' in value or '\\' in value:
            raise ValueError(f"{name} must be a file name inside the log directory, got {value!r}")
