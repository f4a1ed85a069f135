# cultivation/services/filesystem_service.py
import shutil
from pathlib import Path

from cultivation.utils.logger_utils import logger


class CopyFailed(IOError):
    pass


class FileSystemBridge:
    """File operations the settings screen delegates to the host OS."""

    @staticmethod
    def copy_file(source: str, destination_dir: str) -> str:
        """
        Copies a file into destination_dir, creating the directory if needed.
        A file with the same name already there is overwritten.
        Returns the destination path.
        """
        source_path = Path(source)
        target_dir = Path(destination_dir)
        target_path = target_dir / source_path.name

        try:
            if not source_path.is_file():
                raise FileNotFoundError(f"Source file does not exist: {source_path}")
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_path, target_path)
        except OSError as e:
            logger.error(f"Failed to copy '{source_path}' to '{target_dir}': {e}")
            raise CopyFailed(f"Could not copy '{source_path.name}': {e}") from e

        logger.info(f"Copied '{source_path}' to '{target_path}'.")
        return str(target_path)
