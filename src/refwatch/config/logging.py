import logging
from datetime import datetime
from pathlib import Path

import colorlog


def setup_logging(log_dir: Path = Path("logs"), level: int = logging.INFO) -> Path:
    """
    Configure the root logger to write to a per-run file and a colored console.
    Returns the path of the log file for this run.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_filename = log_dir / f"refwatch_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    # NOTE: keeping different formatter since .log can't handle colors
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)-8s - %(message)s'
    )

    console_formatter = colorlog.ColoredFormatter(
        "%(green)s%(asctime)s%(reset)s - %(purple)s%(name)s - %(log_color)s%(levelname)s%(reset)s - %(message)s",
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'blue',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'red,bg_white',
        },
        secondary_log_colors={},
        style='%'
    )

    file_handler = logging.FileHandler(log_filename)
    file_handler.setLevel(level)
    file_handler.setFormatter(file_formatter)

    console_handler = colorlog.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers
    root_logger.handlers = []

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    return log_filename
