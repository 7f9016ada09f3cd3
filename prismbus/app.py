import logging
import sys
from pathlib import Path

from prismbus.lib.args import parse_prismbus_args
from prismbus.lib.directory import Directory
from prismbus.lib.logger import configure_logger, parse_log_level
from prismbus.lib.script_runner import DEMO_SCRIPT, ScriptError, ScriptRunner
from prismbus.lib.settings_manager import SettingsManager
from prismbus.version import __version__


class RuntimeSettings:
    """Plain attribute holder hydrated by SettingsManager.apply_all()."""

    default_bus_name: str
    thread_safe: bool
    log_level: str
    max_log_files: int


def load_script(path):
    if path is None:
        return DEMO_SCRIPT.splitlines()
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def main(argv=None):
    args = parse_prismbus_args(argv)

    runtime = RuntimeSettings()
    settings = SettingsManager(config_file_path=args.config_file_path, target=runtime)
    settings.apply_all(
        default_bus_name=args.default_bus_name,
        thread_safe=args.thread_safe,
        log_level=args.log_level,
        max_log_files=args.max_log_files,
    )

    log_dir = Path(args.log_dir) if args.log_dir else None
    configure_logger(parse_log_level(runtime.log_level), log_dir, int(runtime.max_log_files))
    logging.info(f"prismbus {__version__}")

    directory = Directory.from_settings(settings)
    runner = ScriptRunner(directory)

    try:
        lines = load_script(args.script)
        runner.run(lines)
    except OSError as e:
        logging.error(f"Unable to read script: {e}")
        return 1
    except ScriptError as e:
        logging.error(f"Invalid script, {e}")
        return 1

    for delivery in runner.deliveries:
        print(delivery)

    for bus in directory.instances():
        pending = bus.pending()
        if pending:
            logging.info(f"Bus '{bus.name}' still holds undelivered events: {pending}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
