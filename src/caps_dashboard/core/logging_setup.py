import logging
import logging.handlers
from pathlib import Path
from caps_dashboard.core.config import LOGS_DIR, LOG_FILE, LOG_LEVEL, LOG_LEVELS

DEFAULT_FMT = "%(asctime)s - %(levelname)-5s - %(name)s - %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

# third-party loggers kept at WARNING unless overridden
QUIET_LOGGERS = {"watchdog": "WARNING", "urllib3": "WARNING"}

def parse_logger_levels(spec: str) -> dict[str, str]:
    """Parse comma separated name=LEVEL pairs into {name: LEVEL}."""
    levels = {}
    for item in spec.split(","):
        if not item.strip():
            continue
        name, sep, level = item.partition("=")
        level = level.strip().upper()
        if not sep or not name.strip() or not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid logger level entry: {item.strip()!r}")
        levels[name.strip()] = level
    return levels

def setup_logging(
    level: str = LOG_LEVEL,
    file_name: str = LOG_FILE,
    logger_levels: str = LOG_LEVELS,
    logs_dir: str | Path = LOGS_DIR,
) -> None:
    if getattr(setup_logging, "_configured", False):
        return  # prevent double-config
    Path(logs_dir).mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level.upper())

    formatter = logging.Formatter(DEFAULT_FMT, datefmt=DATE_FMT)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    root.addHandler(ch)

    # Rotating file
    fh = logging.handlers.RotatingFileHandler(
        Path(logs_dir) / file_name, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    fh.setFormatter(formatter)
    root.addHandler(fh)

    for name, lvl in {**QUIET_LOGGERS, **parse_logger_levels(logger_levels)}.items():
        logging.getLogger(name).setLevel(lvl)

    setup_logging._configured = True
