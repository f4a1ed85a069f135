# cultivation/models/config_model.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from cultivation.core.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_THEME,
    KEY_AKEBI_PATH,
    KEY_CLIENT_VERSION,
    KEY_CUSTOM_BACKGROUND,
    KEY_GAME_INSTALL_PATH,
    KEY_GRASSCUTTER_PATH,
    KEY_GRASSCUTTER_WITH_GAME,
    KEY_JAVA_PATH,
    KEY_LANGUAGE,
    KEY_SWAG_MODE,
    KEY_THEME,
)

# Store key -> ConfigurationRecord attribute
KEY_TO_FIELD: dict[str, str] = {
    KEY_GAME_INSTALL_PATH: "game_install_path",
    KEY_GRASSCUTTER_PATH: "grasscutter_path",
    KEY_JAVA_PATH: "java_path",
    KEY_CLIENT_VERSION: "client_version",
    KEY_GRASSCUTTER_WITH_GAME: "grasscutter_with_game",
    KEY_LANGUAGE: "language",
    KEY_CUSTOM_BACKGROUND: "custom_background",
    KEY_THEME: "theme",
    KEY_SWAG_MODE: "swag_mode",
    KEY_AKEBI_PATH: "akebi_path",
}


@dataclass(frozen=True)
class ConfigurationRecord:
    """The persisted launcher configuration. Immutable; one field per option."""

    # --- Executables & Install Locations ---
    game_install_path: str | None = None
    grasscutter_path: str | None = None
    java_path: str | None = None
    akebi_path: str | None = None

    # --- Game ---
    client_version: str | None = None
    grasscutter_with_game: bool = False

    # --- Appearance ---
    language: str = DEFAULT_LANGUAGE
    custom_background: str | None = None
    theme: str = DEFAULT_THEME
    swag_mode: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfigurationRecord:
        """Builds a record from the flat key/value object. Empty strings mean unset."""
        return cls(
            game_install_path=data.get(KEY_GAME_INSTALL_PATH) or None,
            grasscutter_path=data.get(KEY_GRASSCUTTER_PATH) or None,
            java_path=data.get(KEY_JAVA_PATH) or None,
            akebi_path=data.get(KEY_AKEBI_PATH) or None,
            client_version=data.get(KEY_CLIENT_VERSION) or None,
            grasscutter_with_game=bool(data.get(KEY_GRASSCUTTER_WITH_GAME, False)),
            language=data.get(KEY_LANGUAGE) or DEFAULT_LANGUAGE,
            custom_background=data.get(KEY_CUSTOM_BACKGROUND) or None,
            theme=data.get(KEY_THEME) or DEFAULT_THEME,
            swag_mode=bool(data.get(KEY_SWAG_MODE, False)),
        )

    def get(self, key: str) -> Any:
        """Reads a field by its store key."""
        return getattr(self, KEY_TO_FIELD[key])


@dataclass(frozen=True)
class ViewState:
    """
    What the settings screen currently shows. Rebuilt from scratch on every
    (re)initialization; never persisted.
    """

    # --- Mirrored from ConfigurationRecord ---
    game_install_path: str = ""
    grasscutter_path: str = ""
    java_path: str = ""
    akebi_path: str = ""
    client_version: str = ""
    grasscutter_with_game: bool = False
    language: str = DEFAULT_LANGUAGE
    custom_background: str = ""
    theme: str = DEFAULT_THEME
    swag_mode: bool = False

    # --- Derived / Ephemeral ---
    available_languages: list[dict[str, str]] = field(default_factory=list)
    available_themes: list[str] = field(default_factory=lambda: [DEFAULT_THEME])
    available_versions: list[str] = field(default_factory=list)
    metadata_download_link: str | None = None
    # None: unknown (Grasscutter not configured or its config unreadable)
    encryption_enabled: bool | None = None

    @staticmethod
    def field_for(key: str) -> str:
        """Maps a store key to the ViewState attribute that mirrors it."""
        return KEY_TO_FIELD[key]
