# cultivation/services/background_service.py
from dataclasses import dataclass
from enum import Enum, auto

from cultivation.core.constants import BACKGROUND_DIR, KEY_CUSTOM_BACKGROUND, URL_PATTERN
from cultivation.services.config_store import ConfigStore
from cultivation.services.filesystem_service import CopyFailed, FileSystemBridge
from cultivation.utils.logger_utils import logger
from cultivation.utils.path_utils import filename_of, normalize


class ImportFailed(IOError):
    pass


class BackgroundKind(Enum):
    EMPTY = auto()
    URL = auto()
    LOCAL = auto()


@dataclass(frozen=True)
class BackgroundResult:
    """What was persisted as customBackground, and why."""

    kind: BackgroundKind
    stored_value: str


def is_url(value: str) -> bool:
    """True for values starting with http:// or https:// (any case)."""
    return bool(URL_PATTERN.match(value))


class BackgroundImporter:
    """
    Turns a user-supplied background (URL or local image) into the persisted
    customBackground option. Local images are copied into the application's
    own asset directory first so the launcher never depends on the original
    file staying where it was.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        file_system: FileSystemBridge,
        app_data_dir: str,
    ):
        self.config_store = config_store
        self.file_system = file_system
        self.app_data_dir = normalize(app_data_dir).rstrip("/")

    @property
    def asset_dir(self) -> str:
        return f"{self.app_data_dir}/{BACKGROUND_DIR}"

    def target_path_for(self, source: str) -> str:
        """Where a local image ends up once imported."""
        return f"{self.asset_dir}/{filename_of(source)}"

    def set_background(self, value: str) -> BackgroundResult:
        """
        Persists a new background.
        Raises ImportFailed if a local file could not be copied; nothing is
        persisted in that case.
        """
        if not value:
            self.config_store.set(KEY_CUSTOM_BACKGROUND, "")
            logger.info("Custom background cleared.")
            return BackgroundResult(BackgroundKind.EMPTY, "")

        if is_url(value):
            self.config_store.set(KEY_CUSTOM_BACKGROUND, value)
            logger.info(f"Custom background set to URL: {value}")
            return BackgroundResult(BackgroundKind.URL, value)

        source = normalize(value)
        if not filename_of(source):
            raise ImportFailed(f"'{value}' does not name a file.")

        # Same-named files overwrite each other; the newest import wins.
        try:
            self.file_system.copy_file(source, self.asset_dir)
        except CopyFailed as e:
            raise ImportFailed(f"Failed to import background '{value}': {e}") from e

        stored_value = self.target_path_for(source)
        self.config_store.set(KEY_CUSTOM_BACKGROUND, stored_value)
        logger.info(f"Custom background imported to '{stored_value}'.")
        return BackgroundResult(BackgroundKind.LOCAL, stored_value)

    def clear_background(self) -> BackgroundResult:
        return self.set_background("")
