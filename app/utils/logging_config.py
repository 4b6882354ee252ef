"""
Logging setup for the CV Validation API

Every module logs through ``get_logger(__name__)`` so records land under the
``cv_validator`` namespace. Resume text and form values are personal data, so
handlers carry a filter that masks emails and phone numbers before formatting.
"""
import functools
import logging
import logging.config
import os
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

ROOT_LOGGER = "cv_validator"

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-40s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

# environment -> (level, console, file, format); None level means LOG_LEVEL
ENVIRONMENT_PROFILES = {
    "production": (None, True, True, "detailed"),
    "development": ("DEBUG", True, True, "detailed"),
    "testing": ("WARNING", True, False, "simple"),
}

_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE_RE = re.compile(r"\+?\d[\d\s().-]{6,}\d")


def _mask_phone(match) -> str:
    # ISO dates and similar short digit runs stay readable
    digits = sum(c.isdigit() for c in match.group())
    return "<phone>" if digits >= 9 else match.group()


class RedactPersonalData(logging.Filter):
    """Masks email addresses and phone-like digit runs in log messages"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _PHONE_RE.sub(_mask_phone, _EMAIL_RE.sub("<email>", message))
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _file_handler(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filters": ["redact"],
        "filename": str(path),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 5,
        "encoding": "utf8",
    }


def setup_logging(
    level: str = "INFO",
    enable_console: bool = True,
    enable_file: bool = False,
    format_style: str = "detailed",
    log_dir: str = None,
) -> None:
    """
    Apply a dictConfig for the service and uvicorn loggers

    Args:
        level: Logging level name
        enable_console: Log to stdout
        enable_file: Also write daily rotating files under ``log_dir``
        format_style: 'simple' or 'detailed'
        log_dir: Defaults to the LOG_DIR env var, then ``logs``
    """
    handlers: Dict[str, Any] = {}

    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style if format_style in FORMATS else "detailed",
            "filters": ["redact"],
            "stream": "ext://sys.stdout",
        }

    if enable_file:
        directory = Path(log_dir or os.getenv("LOG_DIR", "logs"))
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d")
        handlers["file"] = _file_handler(directory / f"cv_validator_{stamp}.log", level)
        handlers["error_file"] = _file_handler(directory / f"cv_validator_errors_{stamp}.log", "ERROR")

    names = list(handlers)
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"redact": {"()": RedactPersonalData}},
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in FORMATS.items()
        },
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER: {"level": level, "handlers": names, "propagate": False},
            "uvicorn": {"level": "INFO", "handlers": [n for n in names if n != "error_file"], "propagate": False},
        },
    })

    get_logger("logging").info(f"Logging configured - level {level}, handlers {names}")


def get_logger(name: str) -> logging.Logger:
    """Logger under the service namespace, usually called with ``__name__``"""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_for_environment():
    """Pick a logging profile from ENVIRONMENT (production, development, testing)"""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    env_level = os.getenv("LOG_LEVEL", "INFO").upper()

    level, console, to_file, style = ENVIRONMENT_PROFILES.get(environment, (None, True, False, "detailed"))
    setup_logging(level=level or env_level, enable_console=console, enable_file=to_file, format_style=style)


def log_api_call(operation: str):
    """Log start, duration and failure of a sync endpoint"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(f"api.{operation}")
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - started
                logger.error(f"{operation} failed after {elapsed:.3f}s: {e.__class__.__name__}",
                             extra={"execution_time": elapsed})
                raise
            elapsed = time.perf_counter() - started
            logger.info(f"{operation} completed in {elapsed:.3f}s", extra={"execution_time": elapsed})
            return result

        return wrapper
    return decorator


class PerformanceMonitor:
    """Times a block and logs it, warning when it runs past ``threshold_ms``"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.elapsed_ms = None
        self._started = None

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_type.__name__}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
