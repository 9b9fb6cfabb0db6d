import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    log_dir: Union[str, Path] = "logs",
    max_bytes: int = 1024*1024,  # 1MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up a logger that writes to both file and console.

    Args:
        name: Logger name (typically __name__ or a per-match name)
        log_file: Name of the log file (default: derived from logger name)
        level: Logging level (default: INFO)
        log_dir: Directory to store log files (default: 'logs')
        max_bytes: Max size of each log file before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent adding handlers multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = f"{name.split('.')[-1]}.log"

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # write log messages to a file until 1MB, then rotate
    file_handler = logging.handlers.RotatingFileHandler(
        log_path / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def match_logger(match_id: str, log_dir: Union[str, Path] = "logs") -> logging.LoggerAdapter:
    """Per-match logger; every record is prefixed with the match id."""
    logger = setup_logger(f"refwatch.match.{match_id}", log_file=f"match_{match_id}.log", log_dir=log_dir)
    return MatchLoggerAdapter(logger, {"match_id": match_id})


class MatchLoggerAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"[match {self.extra['match_id']}] {msg}", kwargs


def close_logger(logger: Union[logging.Logger, logging.LoggerAdapter]) -> None:
    """Detach and close every handler, releasing the log file."""
    if isinstance(logger, logging.LoggerAdapter):
        logger = logger.logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
