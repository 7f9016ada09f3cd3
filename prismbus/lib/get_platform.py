import os
import sys

APP_DIR_NAME = "prismbus"


def get_platform():
    if sys.platform == "darwin":
        return "osx"
    elif sys.platform.startswith("linux"):
        return "linux"
    elif sys.platform.startswith("win"):
        return "windows"
    else:
        return "unknown"


def is_windows():
    return get_platform() == "windows"


def get_data_directory():
    """
    Returns the writable data directory for the application.
    Windows: %APPDATA%/prismbus
    Linux/Mac: ~/.prismbus
    """
    if is_windows():
        base_path = os.environ.get("APPDATA") or os.path.expanduser("~")
        path = os.path.join(base_path, APP_DIR_NAME)
    else:
        path = os.path.expanduser(f"~/.{APP_DIR_NAME}")

    if not os.path.exists(path):
        os.makedirs(path)

    return path
