# cultivation/core/signals.py
from PyQt6.QtCore import QObject, pyqtSignal


class GlobalSignals(QObject):
    """
    A singleton class for application-wide signals.
    Helps to decouple components that don't have a direct relationship.

    Note: Use this sparingly. Option edits should be observed through the
    SettingsController's own signals.
    """

    # Emitted when a settings change invalidates globally-loaded resources
    # (translations, theme stylesheets, background). Subsystems that own such
    # resources reload themselves when they receive it.
    reload_requested = pyqtSignal()


# Create a single, global instance that can be imported anywhere
global_signals = GlobalSignals()
