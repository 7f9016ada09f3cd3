import argparse

from prismbus.constants import LOG_LEVELS

default_config_file_path = "config.ini"


def parse_log_level_arg(level):
    if level is None:
        return None
    level = level.strip().lower()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(
            f"invalid log level: {level} (choose from {', '.join(LOG_LEVELS)})"
        )
    return level


def parse_prismbus_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="prismbus",
        description="Run an event bus scenario script and print every delivery",
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Scenario script to run, one operation per line. Runs the built-in demo if omitted",
        default=None,
    )
    parser.add_argument(
        "-c",
        "--config-file-path",
        help="Path to a config file to load settings from. Settings set via command line arguments will override settings in the config file (default: %s)"
        % default_config_file_path,
        default=default_config_file_path,
        required=False,
    )
    parser.add_argument(
        "-l",
        "--log-level",
        help="Logging level: %s. Overrides the config file. Use debug to trace routing"
        % ", ".join(LOG_LEVELS),
        type=parse_log_level_arg,
        default=None,
        required=False,
    )
    parser.add_argument(
        "--log-dir",
        help="Directory to write log files to (default: platform log folder)",
        default=None,
        required=False,
    )
    parser.add_argument(
        "--max-log-files",
        help="Number of old log files to keep. Overrides the config file",
        type=int,
        default=None,
        required=False,
    )
    parser.add_argument(
        "-n",
        "--default-bus-name",
        help="Bus name used when none is given. Overrides the config file",
        default=None,
        required=False,
    )
    parser.add_argument(
        "--no-thread-safe",
        help="Disable per-bus locking (single threaded hosts only)",
        action="store_const",
        const=False,
        dest="thread_safe",
        default=None,
        required=False,
    )

    return parser.parse_args(argv)
