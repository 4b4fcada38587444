"""
Logging setup for slcode.

Library modules only create ``logging.getLogger(__name__)`` loggers. An
application calls :func:`setup_logging` (or :func:`debug_mode` while tuning
thresholds on real captures) to decide where the codec messages go.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from slcode.core.constants import MAX_LOG_FILE_SIZE

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s - %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_LOG_ROOT = Path.home() / '.slcode' / 'logs'


def _to_level(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


class SlcodeLogger:
    """Configures the root logger for applications using slcode."""

    # Per-decode statistics are logged at DEBUG, setup and generation at INFO
    MODULE_LEVELS = {
        'slcode.core': logging.WARNING,
        'slcode.common': logging.INFO,
        'slcode.structured_light': logging.INFO,
    }

    @classmethod
    def setup_logging(
        cls,
        level: str = 'INFO',
        log_file: Optional[str] = None,
        console: bool = True,
        module_levels: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Replace the root handlers with a console and/or rotating file handler.

        Args:
            level: Console level name; unknown names fall back to INFO
            log_file: Optional file receiving every record down to DEBUG
            console: Whether to log to stdout
            module_levels: Logger name to level name overrides
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        root_logger.handlers.clear()

        if console:
            root_logger.addHandler(cls._console_handler(_to_level(level)))
        if log_file:
            root_logger.addHandler(cls._file_handler(Path(log_file)))

        levels = dict(cls.MODULE_LEVELS)
        for name, level_name in (module_levels or {}).items():
            levels[name] = _to_level(level_name)
        for name, module_level in levels.items():
            logging.getLogger(name).setLevel(module_level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        return logging.getLogger(name)

    @classmethod
    def setup_debug_logging(cls, session_name: Optional[str] = None,
                            log_root: Optional[str] = None) -> str:
        """
        Log everything to ``<log_root>/<session>/debug.log`` and to the console.

        Args:
            session_name: Session folder name, timestamped when omitted
            log_root: Parent of the session folders, ~/.slcode/logs by default

        Returns:
            Path of the debug log file
        """
        session = session_name or datetime.now().strftime("session_%Y%m%d_%H%M%S")
        log_file = Path(log_root or DEFAULT_LOG_ROOT) / session / 'debug.log'

        cls.setup_logging(
            level='DEBUG',
            log_file=str(log_file),
            module_levels={name: 'DEBUG' for name in cls.MODULE_LEVELS}
        )
        logging.getLogger('slcode').info(f"Debug session {session} logging to {log_file}")
        return str(log_file)

    @staticmethod
    def _console_handler(level: int) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        return handler

    @staticmethod
    def _file_handler(path: Path) -> logging.Handler:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(str(path), maxBytes=MAX_LOG_FILE_SIZE, backupCount=3)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        return handler


def setup_logging(**kwargs) -> None:
    """Configure logging, see :meth:`SlcodeLogger.setup_logging`."""
    SlcodeLogger.setup_logging(**kwargs)


def get_logger(name: str) -> logging.Logger:
    return SlcodeLogger.get_logger(name)


def debug_mode(session_name: Optional[str] = None, log_root: Optional[str] = None) -> str:
    """Enable full DEBUG logging for one session, returns the log file path."""
    return SlcodeLogger.setup_debug_logging(session_name, log_root)
