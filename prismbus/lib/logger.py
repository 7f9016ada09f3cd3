import logging
import logging.handlers
import os
from datetime import datetime
from pathlib import Path

from prismbus.constants import LOG_LEVELS
from prismbus.lib.get_platform import APP_DIR_NAME, get_platform


def get_log_directory() -> Path:
    """Get the log directory path based on the operating system

    Returns:
        Path: The path to the log directory

    Raises:
        OSError: If the operating system is unsupported
    """
    platform = get_platform()

    if platform == "unknown":
        raise OSError("Unsupported OS. Can't determine logs folder.")

    user_home = Path.home()
    if platform == "windows":
        return user_home / "AppData" / "Local" / APP_DIR_NAME / "Logs"

    return user_home / ".config" / APP_DIR_NAME / "logs"  # macOs and Linux use the same log path


def parse_log_level(level: str | int) -> int:
    """Translate a level name such as "debug" into a logging constant

    Unknown names fall back to logging.INFO.
    """
    if isinstance(level, int):
        return level
    return LOG_LEVELS.get(str(level).strip().lower(), logging.INFO)


def clean_old_logs(log_dir: Path, max_files: int = 5):
    """Remove old log files, keeping only the most recent `max_files` logs

    Args:
        log_dir (Path): The directory where the log files are stored.
        max_files (int, optional): The maximum number of log files to keep. Defaults to 5.
    """
    log_files = sorted(log_dir.glob("*.log"), key=os.path.getmtime)
    while len(log_files) > max_files:
        old_log = log_files.pop(0)
        old_log.unlink()


class CustomFormatter(logging.Formatter):
    def format(self, record):
        record.levelname = record.levelname.ljust(8)
        return super().format(record)


def configure_logger(
    log_level: int = logging.DEBUG, log_dir: Path | None = None, max_log_files: int = 5
) -> Path:
    """Configures the logger with log file, format and level

    There are two formatters, one for the console and one for the log file. The console one
    leaves out the timestamp; the log file keeps the full date and time.

    Bus diagnostics (registrations, dispatches, queued events, destroyed instances) are
    emitted at DEBUG level, so run with logging.DEBUG to trace event routing.

    Args:
        log_level (int): The log level to log at. Defaults to logging.DEBUG.
        log_dir (Path | None): Where to store the logs. Defaults to system default.
        max_log_files (int): Keeps only the previous (n) number of log files. Defaults to 5.

    Returns:
        Path: The file the log is written to.
    """
    if log_dir is None:
        log_dir = get_log_directory()

    log_dir.mkdir(exist_ok=True, parents=True)
    clean_old_logs(log_dir=log_dir, max_files=max_log_files)

    log_filename = log_dir / datetime.now().strftime("%Y-%m-%d_%H-%M-%S.log")

    file_handler = logging.handlers.RotatingFileHandler(
        log_filename, maxBytes=10 * 1024**2, backupCount=5
    )
    stream_handler = logging.StreamHandler()

    file_formatter = CustomFormatter(
        "[%(asctime)s] %(levelname)s %(message)s", datefmt="%d.%m.%Y %H:%M:%S"
    )
    console_formatter = logging.Formatter("%(levelname)s %(message)s", datefmt="%H:%M:%S")

    file_handler.setFormatter(file_formatter)
    stream_handler.setFormatter(console_formatter)

    logging.basicConfig(level=log_level, handlers=[file_handler, stream_handler], force=True)

    return log_filename
