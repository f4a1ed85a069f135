# cultivation/services/config_store.py
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from cultivation.core.constants import (
    BOOL_KEYS,
    CONFIG_KEYS,
    DEFAULT_CONFIG,
)
from cultivation.models.config_model import ConfigurationRecord
from cultivation.utils.logger_utils import logger


class StoreUnavailable(IOError):
    pass


class ConfigSaveError(IOError):
    pass


class UnknownOptionError(KeyError):
    pass


class InvalidOptionValue(ValueError):
    pass


class ConfigStore:
    """
    Manages all read/write operations for the launcher's configuration.json.
    The file holds one flat JSON object of option-name -> value.
    """

    def __init__(self, config_path: Path):
        # --- Service Setup ---
        self.config_path = Path(config_path)
        # Serialises each read-modify-write; does not make multi-key edits atomic.
        self._lock = threading.RLock()

    def ensure_defaults(self) -> bool:
        """
        Creates the record with default values at first launch.
        Returns True if the file was created, False if it already existed.
        """
        with self._lock:
            if self.config_path.exists():
                return False
            logger.info(f"No configuration found. Writing defaults to '{self.config_path}'.")
            self._write(dict(DEFAULT_CONFIG))
            return True

    def load_all(self) -> ConfigurationRecord:
        """
        Loads the entire configuration record.
        Raises StoreUnavailable if the file is missing, unreadable or corrupt;
        the caller decides what defaults to fall back to.
        """
        data = self._read()
        logger.info(f"Successfully loaded configuration from {self.config_path.name}.")
        return ConfigurationRecord.from_dict(data)

    def get(self, key: str) -> Any | None:
        """
        Reads a single option. A missing file reads as None; a file that
        exists but cannot be read raises StoreUnavailable.
        """
        self._check_key(key)
        with self._lock:
            if not self.config_path.exists():
                logger.debug(f"No configuration yet; '{key}' reads as unset.")
                return None
            data = self._read()
        return data.get(key)

    def set(self, key: str, value: Any):
        """
        Saves a single option. The write is flushed and fsynced before this
        returns, so a following get() observes the new value.
        Raises ConfigSaveError, leaving the file untouched, when the existing
        record cannot be read.
        """
        self._check_key(key)
        self._check_value(key, value)

        with self._lock:
            if not self.config_path.exists():
                logger.warning("No configuration found while saving; starting from defaults.")
                data = dict(DEFAULT_CONFIG)
            else:
                try:
                    data = self._read()
                except StoreUnavailable as e:
                    # The other options on disk must survive a single-key save
                    raise ConfigSaveError(f"Refusing to overwrite unreadable config file: {e}") from e

            data[key] = value
            self._write(data)

        logger.info(f"Saved setting: {key} = {value!r}")

    # --- Private Helpers ---

    def _read(self) -> dict[str, Any]:
        with self._lock:
            if not self.config_path.is_file():
                raise StoreUnavailable(f"Config file not found at '{self.config_path}'.")
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to read {self.config_path.name}: {e}")
                raise StoreUnavailable(f"Config file could not be read: {e}") from e

        if not isinstance(data, dict):
            raise StoreUnavailable("Config file does not contain a JSON object.")
        return data

    def _write(self, data: dict[str, Any]):
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            prefix=".config-", suffix=".tmp", dir=self.config_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.config_path)
        except (OSError, TypeError) as e:
            logger.error(f"Failed to write config file: {e}", exc_info=True)
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise ConfigSaveError(f"Failed to write to config file: {e}") from e

    @staticmethod
    def _check_key(key: str):
        if key not in CONFIG_KEYS:
            raise UnknownOptionError(key)

    @staticmethod
    def _check_value(key: str, value: Any):
        if key in BOOL_KEYS:
            if not isinstance(value, bool):
                raise InvalidOptionValue(f"'{key}' expects a boolean, got {value!r}.")
        elif not isinstance(value, str):
            raise InvalidOptionValue(f"'{key}' expects a string, got {value!r}.")
