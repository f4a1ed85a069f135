# cultivation/utils/path_utils.py
from PyQt6.QtCore import QStandardPaths


def normalize(path: str) -> str:
    """Replaces every backslash separator with a forward slash. Idempotent."""
    return path.replace("\\", "/")


def directory_of(path: str) -> str:
    """
    Returns everything before the last separator of a file path.
    A path without any separator is returned unchanged.
    """
    normalized = normalize(path)
    index = normalized.rfind("/")
    if index == -1:
        return normalized
    return normalized[:index]


def filename_of(path: str) -> str:
    """Returns the final segment of a path."""
    return normalize(path).rsplit("/", 1)[-1]


def get_app_data_dir() -> str:
    """Resolves the platform's generic data directory (AppData/Roaming, ~/.local/share, ...)."""
    location = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.GenericDataLocation
    )
    return normalize(location).rstrip("/")
