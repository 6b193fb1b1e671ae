import logging
import sys
from pathlib import Path

from config import settings


def ensure_dirs() -> None:
    """Create required directories if they don't already exist."""
    for p in [settings.data_dir, settings.raw_dir, settings.processed_dir, settings.logs_dir]:
        Path(p).mkdir(parents=True, exist_ok=True)


def setup_script_logging(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """Log to stdout and to logs/<log_file>; project loggers propagate to the same handlers."""
    Path(settings.logs_dir).mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(fmt)
        root.addHandler(ch)

        fh = logging.FileHandler(Path(settings.logs_dir) / log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)
    return logging.getLogger(name)

