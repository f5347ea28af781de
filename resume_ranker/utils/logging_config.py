"""
Logging setup for the Resume Ranker API

``ENVIRONMENT`` picks a profile (level, console/file output, line format);
``LOG_LEVEL`` overrides the level in production. File output rotates daily
named files under ``LOG_DIR`` and keeps a separate ERROR-only file.
"""
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

LINE_FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-40s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_BACKUPS = 5

# third-party loggers that are too chatty below these levels
QUIET_LOGGERS = {"pdfminer": "ERROR", "urllib3": "WARNING", "multipart": "WARNING"}


class LoggingProfile(NamedTuple):
    level: str
    to_file: bool
    line_format: str


PROFILES = {
    "production": LoggingProfile("INFO", True, "detailed"),
    "development": LoggingProfile("DEBUG", True, "detailed"),
    "testing": LoggingProfile("WARNING", False, "simple"),
}


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": ROTATE_BYTES,
        "backupCount": ROTATE_BACKUPS,
        "encoding": "utf8",
    }


def build_logging_config(profile: LoggingProfile, log_dir: Optional[Path] = None) -> Dict[str, Any]:
    """dictConfig payload for ``profile``; ``log_dir`` is only used when it writes files."""
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": profile.level,
            "formatter": profile.line_format,
            "stream": "ext://sys.stdout",
        }
    }
    if profile.to_file:
        stamp = datetime.now().strftime("%Y%m%d")
        log_dir = log_dir or Path("logs")
        handlers["file"] = _rotating_file(log_dir / f"resume_ranker_{stamp}.log", profile.level)
        handlers["error_file"] = _rotating_file(log_dir / f"resume_ranker_errors_{stamp}.log", "ERROR")

    loggers: Dict[str, Any] = {
        "uvicorn": {"level": "INFO", "handlers": [h for h in ("console", "file") if h in handlers], "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
    }
    for name, level in QUIET_LOGGERS.items():
        loggers[name] = {"level": level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in LINE_FORMATS.items()
        },
        "handlers": handlers,
        "root": {"level": profile.level, "handlers": list(handlers)},
        "loggers": loggers,
    }


def configure_for_environment() -> LoggingProfile:
    """Apply the profile named by ``ENVIRONMENT`` (default development)."""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    profile = PROFILES.get(environment, PROFILES["production"])
    if environment == "production" or environment not in PROFILES:
        profile = profile._replace(level=os.getenv("LOG_LEVEL", "INFO").upper())

    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    if profile.to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(profile, log_dir))

    get_logger("logging").info(
        f"Logging configured for {environment}: level={profile.level}, file={profile.to_file}"
    )
    return profile


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``resume_ranker`` tree, whatever module name is passed."""
    if name.startswith("resume_ranker"):
        return logging.getLogger(name)
    return logging.getLogger(f"resume_ranker.{name}")


class PerformanceMonitor:
    """Times a block and logs it, at WARNING past ``threshold_ms``"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
