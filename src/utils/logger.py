"""
Logging helpers

- leveled logging with a colored console formatter
- optional rotating log files (regular + error-only)
- cached named loggers and a global debug switch
"""

import os
import sys
import copy
import logging
from pathlib import Path
from typing import Optional, Dict
from logging.handlers import RotatingFileHandler


CONSOLE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(funcName)s:%(lineno)d - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Colors the level name and message when writing to a terminal"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def __init__(self, *args, for_console: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self._for_console = for_console

    def format(self, record):
        if not (self._for_console and sys.stderr.isatty()):
            return super().format(record)

        # copy so that other handlers still see the plain record
        colored = copy.copy(record)
        color = self.COLORS.get(colored.levelname)
        if color:
            colored.levelname = f"{color}{colored.levelname}{self.COLORS['RESET']}"
            colored.msg = f"{color}{colored.msg}{self.COLORS['RESET']}"
        return super().format(colored)


class Logger:
    """Thin wrapper around a stdlib logger with preconfigured handlers"""

    def __init__(
        self,
        name: str = "OrmIntro",
        log_dir: str = "logs",
        debug: bool = False,
        console: bool = True,
        file: bool = False,
    ):
        """
        Args:
            name: logger name
            log_dir: directory for log files (only used when file=True)
            debug: start in DEBUG level instead of INFO
            console: write to stderr
            file: write rotating log files
        """
        self.name = name
        self.debug_mode = debug

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if debug else logging.INFO)
        self.logger.propagate = False
        self.logger.handlers.clear()

        if console:
            # stdout is reserved for walkthrough output
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(
                ColoredFormatter(CONSOLE_FORMAT, datefmt='%H:%M:%S', for_console=True)
            )
            self.logger.addHandler(console_handler)

        if file:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_formatter = logging.Formatter(FILE_FORMAT)

            file_handler = RotatingFileHandler(
                self.log_dir / f"{name.lower()}.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

            error_handler = RotatingFileHandler(
                self.log_dir / f"{name.lower()}_error.log",
                maxBytes=5*1024*1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            self.logger.addHandler(error_handler)

    def set_debug(self, enabled: bool):
        self.debug_mode = enabled
        self.logger.setLevel(logging.DEBUG if enabled else logging.INFO)

    def debug(self, msg: str, *args, **kwargs):
        kwargs['stacklevel'] = kwargs.get('stacklevel', 2)
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        kwargs['stacklevel'] = kwargs.get('stacklevel', 2)
        self.logger.info(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log at ERROR level including the current traceback"""
        kwargs['stacklevel'] = kwargs.get('stacklevel', 2)
        self.logger.exception(msg, *args, **kwargs)


_logger_cache: Dict[str, Logger] = {}
_global_debug = False
_file_logging: Optional[str] = None


def get_logger(name: str = "OrmIntro", **kwargs) -> Logger:
    """
    Return a cached logger, creating it on first use

    Args:
        name: logger name
        **kwargs: extra Logger constructor arguments (first call only)
    """
    if name not in _logger_cache:
        debug = _global_debug or os.getenv('DEBUG', 'false').lower() == 'true'
        if _file_logging is not None:
            kwargs.setdefault('file', True)
            kwargs.setdefault('log_dir', _file_logging)
        _logger_cache[name] = Logger(name=name, debug=debug, **kwargs)

    return _logger_cache[name]


def set_global_debug(enabled: bool):
    """Switch every cached logger (and future ones) between DEBUG and INFO"""
    global _global_debug
    _global_debug = enabled

    for logger in _logger_cache.values():
        logger.set_debug(enabled)


def enable_file_logging(log_dir: str = "logs"):
    """
    Write rotating log files for loggers created from now on

    Loggers created at import time keep their console-only handlers, so
    they are rebuilt here.
    """
    global _file_logging
    _file_logging = log_dir

    for name, logger in list(_logger_cache.items()):
        _logger_cache[name] = Logger(
            name=name, log_dir=log_dir, debug=logger.debug_mode, file=True
        )
