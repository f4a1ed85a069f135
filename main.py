# Main.py
import sys
from pathlib import Path
from PyQt6.QtCore import QThreadPool
from PyQt6.QtWidgets import QApplication
from cultivation.utils.logger_utils import logger, reconfigure_logger

# Import core constants
from cultivation.core.constants import (
    APP_DATA_SUBDIR,
    APP_NAME,
    CACHE_DIR_NAME,
    CONFIG_FILE_NAME,
    LANG_DIR_NAME,
    LOG_DIR_NAME,
    ORG_NAME,
    THEMES_DIR_NAME,
)
from cultivation.core.signals import global_signals

# Import services
from cultivation.services import (
    BackgroundImporter,
    ConfigStore,
    EncryptionFlagClient,
    FileSystemBridge,
    LanguageService,
    ResourceCacheManager,
    ThemeService,
)

# Import utilities
from cultivation.utils.path_utils import get_app_data_dir

# Import view models
from cultivation.viewmodels import SettingsController


def main():
    """The main entry point for the launcher settings host."""

    # --- 1. Qt Application Setup ---
    app = QApplication(sys.argv)
    app.setOrganizationName(ORG_NAME)
    app.setApplicationName(APP_NAME)

    # --- 2. Composition Root: Create and Wire All Dependencies ---
    try:
        app_data_dir = get_app_data_dir()
        data_path = Path(app_data_dir) / APP_DATA_SUBDIR
        config_path = data_path / CONFIG_FILE_NAME
        cache_path = data_path / CACHE_DIR_NAME
        themes_path = data_path / THEMES_DIR_NAME
        log_path = data_path / LOG_DIR_NAME
        lang_path = Path(__file__).resolve().parent / LANG_DIR_NAME

        # Ensure necessary directories exist
        cache_path.mkdir(parents=True, exist_ok=True)
        log_path.mkdir(parents=True, exist_ok=True)
        reconfigure_logger(log_path)
        logger.info("Application starting...")

        # ---Instantiate Services ---
        config_store = ConfigStore(config_path)
        if config_store.ensure_defaults():
            logger.info("First launch: default configuration created.")

        file_system = FileSystemBridge()
        encryption_client = EncryptionFlagClient()
        resource_manager = ResourceCacheManager(cache_dir=cache_path)
        language_service = LanguageService(lang_path)
        theme_service = ThemeService(themes_path)

        # Services that depend on other services.
        background_importer = BackgroundImporter(
            config_store=config_store,
            file_system=file_system,
            app_data_dir=app_data_dir,
        )

        logger.info("Core services initialized.")
    except Exception as e:
        logger.critical(f"Failed to initialize core components: {e}", exc_info=True)
        return 1

    # ---Instantiate Controller ---
    settings_controller = SettingsController(
        config_store=config_store,
        resource_manager=resource_manager,
        encryption_client=encryption_client,
        background_importer=background_importer,
        language_service=language_service,
        theme_service=theme_service,
        thread_pool=QThreadPool.globalInstance(),
    )

    # Without a view attached, notices and reloads only reach the log.
    settings_controller.notice_requested.connect(
        lambda message, level: logger.info(f"[notice:{level}] {message}")
    )
    global_signals.reload_requested.connect(
        lambda: logger.info("Reloading translations and theme.")
    )

    try:
        settings_controller.initialize()
    except Exception as e:
        logger.critical(f"Failed to load settings: {e}", exc_info=True)
        return 1

    # Start Application Event Loop
    logger.info("Entering event loop...")
    try:
        exit_code = app.exec()
        logger.info(f"Application exiting with code {exit_code}")
        return exit_code
    except Exception as e:
        logger.critical(
            f"Unhandled exception in application event loop: {e}", exc_info=True
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
