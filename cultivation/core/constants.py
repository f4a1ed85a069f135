# cultivation/core/constants.py
import re

# --- Application Info ---
APP_NAME: str = "Cultivation"
ORG_NAME: str = "Grasscutters"
APP_VERSION: str = "1.0.0"

# --- File & Directory Names ---
CONFIG_FILE_NAME: str = "configuration.json"
RESOURCE_CACHE_FILE_NAME: str = "resources.json"
CACHE_DIR_NAME: str = "cache"
APP_DATA_SUBDIR: str = "cultivation"
LOG_DIR_NAME: str = "logs"
LANG_DIR_NAME: str = "lang"
THEMES_DIR_NAME: str = "themes"
THEME_INDEX_NAME: str = "index.json"
SERVER_CONFIG_NAME: str = "config.json"

# Background assets live under <app data>/cultivation/bg/
BACKGROUND_DIR: str = "cultivation/bg"
URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# --- Configuration Record Keys ---
KEY_GAME_INSTALL_PATH: str = "game_install_path"
KEY_GRASSCUTTER_PATH: str = "grasscutter_path"
KEY_JAVA_PATH: str = "java_path"
KEY_CLIENT_VERSION: str = "client_version"
KEY_GRASSCUTTER_WITH_GAME: str = "grasscutter_with_game"
KEY_LANGUAGE: str = "language"
KEY_CUSTOM_BACKGROUND: str = "customBackground"
KEY_THEME: str = "theme"
KEY_SWAG_MODE: str = "swag_mode"
KEY_AKEBI_PATH: str = "akebi_path"

PATH_KEYS: tuple[str, ...] = (
    KEY_GAME_INSTALL_PATH,
    KEY_GRASSCUTTER_PATH,
    KEY_JAVA_PATH,
    KEY_AKEBI_PATH,
)
BOOL_KEYS: tuple[str, ...] = (KEY_GRASSCUTTER_WITH_GAME, KEY_SWAG_MODE)
STRING_KEYS: tuple[str, ...] = (
    KEY_CLIENT_VERSION,
    KEY_LANGUAGE,
    KEY_CUSTOM_BACKGROUND,
    KEY_THEME,
)
CONFIG_KEYS: tuple[str, ...] = PATH_KEYS + BOOL_KEYS + STRING_KEYS

DEFAULT_LANGUAGE: str = "en"
DEFAULT_THEME: str = "default"

# Written once at first launch.
DEFAULT_CONFIG: dict[str, object] = {
    KEY_GAME_INSTALL_PATH: "",
    KEY_GRASSCUTTER_PATH: "",
    KEY_JAVA_PATH: "",
    KEY_CLIENT_VERSION: "",
    KEY_GRASSCUTTER_WITH_GAME: False,
    KEY_LANGUAGE: DEFAULT_LANGUAGE,
    KEY_CUSTOM_BACKGROUND: "",
    KEY_THEME: DEFAULT_THEME,
    KEY_SWAG_MODE: False,
    KEY_AKEBI_PATH: "",
}

# --- Grasscutter server config.json ---
ENCRYPTION_FLAG_PATH: tuple[str, ...] = ("server", "http", "encryption", "useEncryption")
ENCRYPTION_ROUTING_FLAG: str = "useInRouting"

# --- Launcher Resources ---
HTTP_TIMEOUT_SECONDS: int = 10
RESOURCE_API_URL: str = (
    "https://sdk-os-static.mihoyo.com/hk4e_global/mdk/launcher/api/resource"
    "?key=gcStgarh&launcher_id=10&channel_id=1&sub_channel_id=0&version={version}"
)
# Selectable client versions, in display order.
CLIENT_VERSIONS: dict[str, str] = {
    version: RESOURCE_API_URL.format(version=version)
    for version in ("2.6.0", "2.7.0", "2.8.0", "3.0.0", "3.1.0", "3.2.0")
}
