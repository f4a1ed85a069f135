# cultivation/utils/logger_utils.py

import logging
import logging.handlers
import sys
from pathlib import Path
from datetime import datetime


# ANSI escape codes for colors
class LogColors:
    RESET = "\x1b[0m"
    GREY = "\x1b[38;21m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    RED = "\x1b[31m"
    BOLD_RED = "\x1b[31;1m"
    CYAN = "\x1b[36m"


class ColoredFormatter(logging.Formatter):
    """
    Custom formatter to add colors to console log output.
    Layout: <time> | <level> | <file, line | logger:function> - <message>
    """

    LOG_LEVEL_COLORS = {
        logging.DEBUG: LogColors.GREY,
        logging.INFO: LogColors.GREEN,
        logging.WARNING: LogColors.YELLOW,
        logging.ERROR: LogColors.RED,
        logging.CRITICAL: LogColors.BOLD_RED,
    }

    def __init__(self, datefmt="%B %d, %Y > %H:%M:%S"):
        # The base format string is unused, format() builds the line itself
        super().__init__(fmt="%(message)s", datefmt=datefmt)

    def format(self, record):
        level_color = self.LOG_LEVEL_COLORS.get(record.levelno, LogColors.RESET)

        time_str = self.formatTime(record, self.datefmt)
        colored_time = f"{LogColors.GREEN}{time_str}{LogColors.RESET}"

        # 8-character padding keeps the columns aligned
        colored_level = f"{level_color}{record.levelname:<8}{LogColors.RESET}"

        # Clickable in most IDE consoles
        location = f'File "{record.pathname}", line {record.lineno} |  {record.name}:{record.funcName}'
        colored_location = f"{LogColors.CYAN}{location}{LogColors.RESET}"

        message = record.getMessage()
        colored_message = f"{level_color}{message}{LogColors.RESET}"

        log_entry = (
            f"{colored_time} | {colored_level} | {colored_location} - {colored_message}"
        )

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            log_entry += f"\n{LogColors.RED}{record.exc_text}{LogColors.RESET}"

        return log_entry


# Global variable to store the logger instance
_logger_instance = None
_custom_log_dir = None


def get_logger():
    """
    Get the logger instance. This ensures all modules get the same logger instance.
    Uses lazy initialization - logger is only created when first accessed.
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = setup_logger(_custom_log_dir)
    return _logger_instance


def setup_logger(log_dir=None):
    # === Setup log folder & file name ===
    if log_dir is None:
        log_dir = Path(__file__).resolve().parent.parent.parent / "logs"
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H-%M-%S")
    log_file_path = log_dir / f"LOG_CULTIVATION_{timestamp}.log"

    logger = logging.getLogger("Cultivation")
    logger.setLevel(logging.DEBUG)

    # Prevents duplicate handlers when reconfigured
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    # === Console handler (manual coloring) ===
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(ColoredFormatter(datefmt="%B %d, %Y > %H:%M:%S"))
    logger.addHandler(console_handler)

    # === File handler (no color, structured) ===
    # 5 MB per file, 10 files retained
    max_bytes = 5 * 1024 * 1024
    backup_count = 10
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        fmt="{asctime} | {levelname} | {name}:{funcName}:{lineno} - {message}",
        datefmt="%Y-%m-%d %H:%M:%S",
        style="{",
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    return logger


def reconfigure_logger(log_dir):
    """
    Reconfigure the existing logger with a new log directory.
    Called from main.py once the application data directory is known.
    """
    global _logger_instance, _custom_log_dir
    _custom_log_dir = log_dir
    _logger_instance = setup_logger(log_dir)
    return _logger_instance


class LoggerProxy:
    """
    A proxy class that forwards all logging calls to the actual logger instance.
    This ensures lazy initialization while maintaining the same interface.
    """

    def __getattr__(self, name):
        actual_logger = get_logger()
        return getattr(actual_logger, name)


# Create the logger proxy instance - this doesn't create the actual logger yet
logger = LoggerProxy()
__all__ = ["logger", "reconfigure_logger"]
