from __future__ import annotations

import logging

from prismbus.lib.directory import Directory

_directory = None


def get_directory() -> Directory:
    """Get the process-wide Directory, creating it on first use

    Returns:
        Directory: The directory used by the module level post/register functions.
    """
    global _directory
    if _directory is None:
        _directory = Directory()
    return _directory


def set_directory(directory: Directory | None) -> Directory | None:
    """Replace the process-wide Directory

    Passing None drops the current one so the next get_directory() call starts fresh.

    Args:
        directory (Directory | None): The directory to install.

    Returns:
        Directory | None: The directory that was installed before.
    """
    global _directory
    previous = _directory
    _directory = directory
    logging.debug("Installed event bus directory: %s", directory)
    return previous
