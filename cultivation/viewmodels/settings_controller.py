# cultivation/viewmodels/settings_controller.py

import dataclasses
from typing import Any, Optional

from PyQt6.QtCore import QObject, pyqtSignal, QThreadPool

from cultivation.core.constants import (
    KEY_CLIENT_VERSION,
    KEY_CUSTOM_BACKGROUND,
    KEY_GRASSCUTTER_PATH,
)
from cultivation.core.signals import global_signals
from cultivation.models.config_model import ConfigurationRecord, ViewState
from cultivation.models.option_model import (
    OPTION_POLICIES,
    EditPhase,
    OptionPolicy,
    PersistMode,
    SideEffect,
)
from cultivation.models.resource_model import CacheEntry
from cultivation.services.background_service import (
    BackgroundImporter,
    BackgroundKind,
    BackgroundResult,
    ImportFailed,
)
from cultivation.services.config_store import (
    ConfigSaveError,
    ConfigStore,
    InvalidOptionValue,
    StoreUnavailable,
    UnknownOptionError,
)
from cultivation.services.language_service import LanguageService
from cultivation.services.resource_service import ResourceCacheManager
from cultivation.services.server_config_service import (
    EncryptionFlagClient,
    ServerConfigMissing,
)
from cultivation.services.theme_service import ThemeService
from cultivation.utils.async_utils import Worker
from cultivation.utils.logger_utils import logger

# Failures a single-option write can surface to the user
_WRITE_ERRORS = (ConfigSaveError, InvalidOptionValue, UnknownOptionError)


class SettingsController(QObject):
    """
    The single point of mutation for launcher options.

    Every edit goes through the policy table in OPTION_POLICIES: the value is
    persisted, an optional side effect runs (resource refresh, background
    import), and options that touch globally-loaded resources trigger a full
    reinitialization once their write is durable. The ViewState is kept in
    step with the store after each edit.
    """

    # ---Signals for UI ---
    view_state_changed = pyqtSignal(object)  # ViewState
    notice_requested = pyqtSignal(str, str)  # message, level
    edit_phase_changed = pyqtSignal(str, object)  # key, EditPhase
    reinitialized = pyqtSignal()

    def __init__(
        self,
        config_store: ConfigStore,
        resource_manager: ResourceCacheManager,
        encryption_client: EncryptionFlagClient,
        background_importer: BackgroundImporter,
        language_service: LanguageService,
        theme_service: ThemeService,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()
        # ---Injected Services ---
        self.config_store = config_store
        self.resource_manager = resource_manager
        self.encryption_client = encryption_client
        self.background_importer = background_importer
        self.language_service = language_service
        self.theme_service = theme_service
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        # ---Internal State ---
        self.view_state: ViewState | None = None
        self.edit_phases: dict[str, EditPhase] = {}

    # ---Initialization ---

    def initialize(self) -> ViewState:
        """Builds a fresh ViewState from the persisted record and its collaborators."""
        logger.info("Loading settings...")
        try:
            record = self.config_store.load_all()
        except StoreUnavailable as e:
            logger.warning(f"{e} Using default settings.")
            record = ConfigurationRecord()

        cached_entry = None
        if record.client_version:
            # Cached only; switching versions is what forces a download
            cached_entry = self.resource_manager.read_cached(record.client_version)

        self.view_state = ViewState(
            game_install_path=record.game_install_path or "",
            grasscutter_path=record.grasscutter_path or "",
            java_path=record.java_path or "",
            akebi_path=record.akebi_path or "",
            client_version=record.client_version or "",
            grasscutter_with_game=record.grasscutter_with_game,
            language=record.language,
            custom_background=record.custom_background or "",
            theme=record.theme,
            swag_mode=record.swag_mode,
            available_languages=self.language_service.get_languages(),
            available_themes=self.theme_service.get_theme_names(),
            available_versions=self.resource_manager.get_versions(),
            metadata_download_link=cached_entry.metadata_backup_link if cached_entry else None,
            encryption_enabled=self._read_encryption(record.grasscutter_path),
        )

        logger.debug(f"Settings view ready: {self.view_state}")
        self.view_state_changed.emit(self.view_state)
        return self.view_state

    def reinitialize(self):
        """
        Discards the current view and rebuilds everything from the store.
        Subsystems holding global resources (translations, theme) are told to
        reload first, so the rebuilt view is loaded against them.
        """
        logger.info("Reinitializing settings after a change to global resources.")
        self.view_state = None
        global_signals.reload_requested.emit()
        self.initialize()
        self.reinitialized.emit()

    # ---Public Methods (API for the View) ---

    def set_option(self, key: str, value: Any):
        """Applies an edit to any option according to its policy."""
        policy = OPTION_POLICIES.get(key)
        if policy is None:
            logger.warning(f"Ignoring edit to unknown option '{key}'.")
            self.notice_requested.emit(f"Unknown setting '{key}'.", "error")
            return

        if policy.persist is PersistMode.DELEGATE:
            if policy.side_effect is SideEffect.IMPORT_BACKGROUND:
                self.set_custom_background(value)
            else:
                logger.error(f"No delegate handles '{key}' ({policy.side_effect.name}).")
                self.notice_requested.emit(f"Setting '{key}' cannot be changed here.", "error")
        elif policy.persist is PersistMode.INVERT:
            # A checkbox edit: the persisted value decides, not the widget's
            self.toggle_option(key)
        else:
            self._write_option(policy, value)

    def toggle_option(self, key: str) -> Optional[bool]:
        """
        Reads the persisted boolean and writes its inverse.
        Runs entirely on the calling thread, so two toggles dispatched by the
        UI event loop never interleave their read and write.
        """
        policy = OPTION_POLICIES.get(key)
        if policy is None or policy.persist is not PersistMode.INVERT:
            logger.warning(f"'{key}' is not a toggleable option.")
            self.notice_requested.emit(f"'{key}' cannot be toggled.", "error")
            return None

        self._set_phase(key, EditPhase.EDITING)
        try:
            current = self.config_store.get(key)
        except StoreUnavailable as e:
            logger.error(f"Cannot toggle '{key}': {e}")
            self.notice_requested.emit(f"Failed to read settings: {e}", "error")
            self._set_phase(key, EditPhase.IDLE)
            return None
        new_value = not bool(current)
        if not self._persist(key, new_value):
            self._set_phase(key, EditPhase.IDLE)
            return None

        self._set_phase(key, EditPhase.PERSISTED)
        self._update_view(**{ViewState.field_for(key): new_value})
        self._set_phase(key, EditPhase.IDLE)
        return new_value

    def set_custom_background(self, value: str):
        """Flow: classify, copy (local files), persist, then reinitialize."""
        value = value or ""
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.EDITING)
        # Copying and persisting happen together inside the importer
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.SIDE_EFFECT)

        worker = Worker(self.background_importer.set_background, value)
        worker.signals.result.connect(self._on_background_imported)
        worker.signals.error.connect(self._on_background_error)
        self.thread_pool.start(worker)

    def clear_custom_background(self):
        """The clear button: drop the background and reload with the default one."""
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.EDITING)
        try:
            result = self.background_importer.clear_background()
        except _WRITE_ERRORS as e:
            logger.error(f"Failed to clear custom background: {e}")
            self.notice_requested.emit(f"Failed to clear background: {e}", "error")
            self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.IDLE)
            return

        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.PERSISTED)
        self._update_view(custom_background=result.stored_value)
        self.reinitialize()
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.IDLE)

    def toggle_encryption(self):
        """
        Flips the encryption flag in the Grasscutter server's config.json,
        which sits next to the configured server jar.
        """
        try:
            jar_path = self.config_store.get(KEY_GRASSCUTTER_PATH)
        except StoreUnavailable as e:
            logger.error(f"Could not toggle encryption: {e}")
            self.notice_requested.emit(f"Failed to read settings: {e}", "error")
            return
        if not jar_path:
            logger.warning("Encryption toggle refused: Grasscutter path is not set.")
            self.notice_requested.emit("Grasscutter not set!", "warning")
            return

        server_config_path = self.encryption_client.config_path_for(jar_path)
        try:
            self.encryption_client.toggle(server_config_path)
            enabled = self.encryption_client.is_enabled(server_config_path)
        except ServerConfigMissing as e:
            logger.error(f"Could not toggle encryption: {e}")
            self.notice_requested.emit(
                f"Could not change encryption. Grasscutter config not found: {server_config_path}",
                "error",
            )
            return

        self._update_view(encryption_enabled=enabled)

    def is_busy(self, key: str) -> bool:
        """True while an edit to `key` has not run to completion."""
        return self.edit_phases.get(key, EditPhase.IDLE) is not EditPhase.IDLE

    # ---Private Helpers ---

    def _write_option(self, policy: OptionPolicy, value: Any):
        key = policy.key
        self._set_phase(key, EditPhase.EDITING)
        if not self._persist(key, value):
            self._set_phase(key, EditPhase.IDLE)
            return

        self._set_phase(key, EditPhase.PERSISTED)
        self._update_view(**{ViewState.field_for(key): value})

        if policy.side_effect is SideEffect.REFRESH_CACHE:
            self._start_resource_refresh(value)
            return

        if policy.reinit_required:
            self.reinitialize()
        self._set_phase(key, EditPhase.IDLE)

    def _persist(self, key: str, value: Any) -> bool:
        try:
            self.config_store.set(key, value)
        except _WRITE_ERRORS as e:
            logger.error(f"Failed to save '{key}': {e}")
            self.notice_requested.emit(f"Failed to save setting: {e}", "error")
            return False
        return True

    def _start_resource_refresh(self, version: str):
        self._set_phase(KEY_CLIENT_VERSION, EditPhase.SIDE_EFFECT)
        # The old version's link must not stay clickable while downloading
        self._update_view(metadata_download_link=None)

        worker = Worker(self._refresh_resources, version)
        worker.signals.result.connect(self._on_resources_refreshed)
        worker.signals.error.connect(self._on_resources_error)
        self.thread_pool.start(worker)

    def _refresh_resources(self, version: str) -> tuple[str, Optional[CacheEntry]]:
        """Runs on a worker thread."""
        return version, self.resource_manager.refresh(version)

    def _read_encryption(self, grasscutter_path: str | None) -> bool | None:
        if not grasscutter_path:
            return None
        server_config_path = self.encryption_client.config_path_for(grasscutter_path)
        try:
            return self.encryption_client.is_enabled(server_config_path)
        except ServerConfigMissing as e:
            logger.warning(f"Encryption state unknown: {e}")
            return None

    def _update_view(self, **changes: Any):
        if self.view_state is None:
            return
        self.view_state = dataclasses.replace(self.view_state, **changes)
        self.view_state_changed.emit(self.view_state)

    def _set_phase(self, key: str, phase: EditPhase):
        self.edit_phases[key] = phase
        logger.debug(f"Option '{key}' -> {phase.name}")
        self.edit_phase_changed.emit(key, phase)

    # ---Private Slots for Async Results ---

    def _on_resources_refreshed(self, result: tuple):
        version, entry = result
        if self.view_state is None or self.view_state.client_version != version:
            logger.debug(f"Discarding resources for '{version}'; a newer version was selected.")
            return

        link = entry.metadata_backup_link if entry else None
        if link is None:
            logger.info(f"No metadata download available for version '{version}'.")
        self._update_view(metadata_download_link=link)
        self._set_phase(KEY_CLIENT_VERSION, EditPhase.IDLE)

    def _on_resources_error(self, error_info: tuple):
        exctype, value, tb = error_info
        logger.critical(f"A worker error occurred while refreshing resources: {value}\n{tb}")
        self._update_view(metadata_download_link=None)
        self._set_phase(KEY_CLIENT_VERSION, EditPhase.IDLE)

    def _on_background_imported(self, result: BackgroundResult):
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.PERSISTED)
        self._update_view(custom_background=result.stored_value)

        if result.kind is not BackgroundKind.EMPTY:
            self.reinitialize()
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.IDLE)

    def _on_background_error(self, error_info: tuple):
        exctype, value, tb = error_info
        if isinstance(value, (ImportFailed,) + _WRITE_ERRORS):
            logger.error(f"Background change failed: {value}")
            self.notice_requested.emit(str(value), "error")
        else:
            logger.critical(f"A worker error occurred while importing a background: {value}\n{tb}")
            self.notice_requested.emit(
                "A critical error occurred while changing the background. Please check the logs.",
                "error",
            )
        self._set_phase(KEY_CUSTOM_BACKGROUND, EditPhase.IDLE)
