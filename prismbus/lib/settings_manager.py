"""Bus settings management with config file persistence."""

from __future__ import annotations

import configparser
import logging
import os
from typing import Any

from flask_babel import _

from prismbus.constants import CONFIG_SECTION, LOG_LEVELS
from prismbus.lib.get_platform import get_data_directory

TRUE_WORDS = ("true", "yes", "on", "1")
FALSE_WORDS = ("false", "no", "off", "0")


class SettingsManager:
    """Single source of truth for event bus settings.

    Stores settings in config.ini under the [PRISMBUS] section. Each value is
    coerced to the type of its entry in DEFAULTS, so a bus called "42" stays
    a string and "off" turns locking off.
    """

    DEFAULTS = {
        "default_bus_name": "default",
        "thread_safe": True,
        "log_level": "info",
        "max_log_files": 5,
    }

    def __init__(self, config_file_path: str = "config.ini", target: object | None = None) -> None:
        """Initialize with config path and optional target object to sync.

        Args:
            config_file_path: Path to config.ini (relative paths go in data directory)
            target: Optional object to sync attributes on when settings change
        """
        self._config_obj = configparser.ConfigParser()
        self._target = target

        if not os.path.isabs(config_file_path):
            self.config_file_path = os.path.join(get_data_directory(), config_file_path)
        else:
            self.config_file_path = config_file_path

        logging.debug(f"Using config file: {self.config_file_path}")

    def get(self, setting: str, default_value: Any = None) -> Any:
        """Read a setting from the config file, or ``default_value`` when unset or malformed."""
        # Missing files are skipped by configparser
        self._config_obj.read(self.config_file_path, encoding="utf-8")

        raw = self._config_obj.get(CONFIG_SECTION, setting, fallback=None)
        if raw is None:
            return default_value
        try:
            return self.coerce(setting, raw)
        except ValueError as e:
            logging.warning(f"Ignoring bad value for << {setting} >> in config: {e}")
            return default_value

    def get_or_default(self, setting: str) -> Any:
        """Get a setting value, falling back to DEFAULTS if not set."""
        return self.get(setting, self.DEFAULTS.get(setting))

    def set(self, setting: str, val: Any) -> tuple[bool, str]:
        """Validate, persist and sync one setting.

        Returns (success, message) tuple.
        """
        try:
            typed_val = self.coerce(setting, val)
        except ValueError as e:
            logging.debug(f"Rejected bus setting << {setting} >>: {e}")
            return (False, _("Invalid value for %(setting)s", setting=setting))

        logging.debug(f"Changing bus setting << {setting} >> to {typed_val}")
        try:
            self._config_obj.read(self.config_file_path, encoding="utf-8")
            if not self._config_obj.has_section(CONFIG_SECTION):
                self._config_obj.add_section(CONFIG_SECTION)
            self._config_obj.set(CONFIG_SECTION, setting, str(typed_val))

            with open(self.config_file_path, "w", encoding="utf-8") as conf:
                self._config_obj.write(conf)
        except OSError as e:
            logging.error(f"Failed to save bus setting << {setting} >>: {e}")
            return (False, _("Bus setting %(setting)s not changed", setting=setting))

        if self._target is not None:
            setattr(self._target, setting, typed_val)
        return (True, _("Bus setting %(setting)s saved successfully", setting=setting))

    def coerce(self, setting: str, val: Any) -> Any:
        """Convert ``val`` to the type DEFAULTS declares for ``setting``.

        Unknown settings are kept as strings.

        Raises:
            ValueError: If the value cannot represent the setting.
        """
        default = self.DEFAULTS.get(setting)
        text = str(val).strip()

        if isinstance(default, bool):
            if isinstance(val, bool):
                return val
            if text.lower() in TRUE_WORDS:
                return True
            if text.lower() in FALSE_WORDS:
                return False
            raise ValueError(f"expected a yes/no value, got {val!r}")

        if isinstance(default, int):
            number = int(text)
            if number < 0:
                raise ValueError(f"expected a non-negative number, got {number}")
            return number

        if setting == "log_level":
            level = text.lower()
            if level not in LOG_LEVELS:
                raise ValueError(f"unknown log level {val!r}")
            return level

        if setting == "default_bus_name" and not text:
            raise ValueError("bus name cannot be empty")
        return text

    def apply_all(self, **cli_overrides: Any) -> None:
        """Hydrate target object with all settings from config/defaults.

        Priority: CLI argument (if provided) > config file > DEFAULTS

        CLI arguments that are explicitly provided are persisted to config.

        Args:
            **cli_overrides: CLI arguments that should override config values
        """
        if self._target is None:
            return

        for setting, default in self.DEFAULTS.items():
            cli_value = cli_overrides.get(setting)

            # Flags default to None, so None means "not passed"
            if cli_value is not None:
                success, message = self.set(setting, cli_value)
                if success:
                    continue
                logging.warning(message)
            setattr(self._target, setting, self.get(setting, default))
