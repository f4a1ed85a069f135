# cultivation/services/server_config_service.py
import json
from pathlib import Path
from typing import Any

from cultivation.core.constants import (
    ENCRYPTION_FLAG_PATH,
    ENCRYPTION_ROUTING_FLAG,
    SERVER_CONFIG_NAME,
)
from cultivation.utils.logger_utils import logger
from cultivation.utils.path_utils import directory_of, normalize


class ServerConfigMissing(IOError):
    pass


class EncryptionFlagClient:
    """
    Reads and flips the encryption flag inside the Grasscutter server's own
    config.json. The file belongs to the server: it is never created here and
    every other setting in it is written back untouched. The server may
    rewrite the file at any time, so a read can be stale by the time it is used.
    """

    @staticmethod
    def config_path_for(grasscutter_jar_path: str) -> str:
        """<directory of the server jar>/config.json"""
        return f"{directory_of(normalize(grasscutter_jar_path))}/{SERVER_CONFIG_NAME}"

    def is_enabled(self, server_config_path: str) -> bool:
        """Returns the current flag; an absent flag reads as disabled."""
        return self._read_flag(self._load(server_config_path))

    def toggle(self, server_config_path: str) -> bool:
        """
        Inverts the stored flag and writes the file back.
        Returns the new value. Calling it twice restores the original state.
        """
        data = self._load(server_config_path)
        new_value = not self._read_flag(data)

        # Walk to the parent of the flag, creating intermediate sections
        parent = data
        for part in ENCRYPTION_FLAG_PATH[:-1]:
            child = parent.get(part)
            if not isinstance(child, dict):
                child = {}
                parent[part] = child
            parent = child

        parent[ENCRYPTION_FLAG_PATH[-1]] = new_value
        parent[ENCRYPTION_ROUTING_FLAG] = new_value

        try:
            with open(server_config_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to write server config '{server_config_path}': {e}")
            raise ServerConfigMissing(f"Server config could not be written: {e}") from e

        logger.info(f"Server encryption {'enabled' if new_value else 'disabled'} in '{server_config_path}'.")
        return new_value

    # --- Private Helpers ---

    @staticmethod
    def _read_flag(data: dict[str, Any]) -> bool:
        node: Any = data
        for part in ENCRYPTION_FLAG_PATH:
            if not isinstance(node, dict) or part not in node:
                return False
            node = node[part]
        return bool(node)

    @staticmethod
    def _load(server_config_path: str) -> dict[str, Any]:
        path = Path(server_config_path)
        if not path.is_file():
            raise ServerConfigMissing(f"Server config not found at '{server_config_path}'.")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read server config '{server_config_path}': {e}")
            raise ServerConfigMissing(f"Server config could not be read: {e}") from e

        if not isinstance(data, dict):
            raise ServerConfigMissing("Server config does not contain a JSON object.")
        return data
