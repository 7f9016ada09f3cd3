LOG_TAG = "prism-event-bus"

DEFAULT_BUS_NAME = "default"

CONFIG_SECTION = "PRISMBUS"

LOG_LEVELS = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
    "critical": 50,
}
