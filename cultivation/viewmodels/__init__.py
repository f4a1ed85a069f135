from .settings_controller import SettingsController
