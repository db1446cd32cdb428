"""
Unified Logging Configuration for Prompt Sanitizer

This module provides a centralized logging system that combines:
- Console output with timestamps (DEBUG_MODE only)
- Optional plain-text trace file (PROMPT_SANITIZER_DEBUG_LOG)
- Optional standard log file (PROMPT_SANITIZER_LOG_FILE)
- Block timing via the Timer context manager

All modules should import logging functions from this module:
    from prompt_sanitizer.logging_config import debug_log, info, warning, error, Timer

The module respects DEBUG_MODE from config:
- DEBUG_MODE=True: All messages shown on console, verbose timing
- DEBUG_MODE=False: Only warnings/errors reach the standard logger's handlers

Log Levels:
- debug_log(): Trace file (if configured); console only in DEBUG_MODE
- info(): Standard information messages
- warning(): Warning messages
- error(): Error messages with optional exception info
"""

import logging
import sys
import time
from datetime import datetime

from prompt_sanitizer.config import (
    APP_NAME,
    DEBUG_LOG_FILE,
    DEBUG_MODE,
    LOG_DATE_FORMAT,
    LOG_FILE,
    LOG_FORMAT,
)

# =============================================================================
# Trace File Logger (opt-in)
# =============================================================================

class _DebugFileLogger:
    """
    Manages the optional debug trace file.

    The file is opened on first write, and only when DEBUG_LOG_FILE is set.
    """

    _instance = None
    _log_file = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def _initialize_log_file(cls):
        """Create and initialize the debug log file."""
        cls._log_file = open(DEBUG_LOG_FILE, 'w', encoding='utf-8')
        cls._log_file.write(f"=== {APP_NAME} Debug Log ===\n")
        cls._log_file.write(f"Started: {datetime.now().isoformat()}\n")
        cls._log_file.write(f"DEBUG_MODE: {DEBUG_MODE}\n")
        cls._log_file.write("=" * 60 + "\n\n")
        cls._log_file.flush()

    def write(self, message: str):
        """Write message to the debug log file, if one is configured."""
        if DEBUG_LOG_FILE is None:
            return
        if self._log_file is None:
            try:
                self._initialize_log_file()
            except OSError:
                return
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self._log_file.write(f"[{timestamp}] {message}\n")
        self._log_file.flush()

    def close(self):
        """Close the debug log file gracefully."""
        if self._log_file:
            self._log_file.write(f"\n{'=' * 60}\n")
            self._log_file.write(f"Ended: {datetime.now().isoformat()}\n")
            self._log_file.close()
            type(self)._log_file = None


# Global debug file logger instance
_debug_file_logger = _DebugFileLogger()


# =============================================================================
# Standard Python Logging Setup
# =============================================================================

def _setup_standard_logging() -> logging.Logger:
    """
    Configure the standard Python logging framework.

    Returns:
        Configured logger instance for Prompt Sanitizer
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    if LOG_FILE is not None:
        try:
            file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            logger.addHandler(file_handler)
        except OSError:
            pass  # Unwritable log path: keep going without the file

    if DEBUG_MODE:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


# Global standard logger instance
_logger = _setup_standard_logging()


# =============================================================================
# Timer Context Manager
# =============================================================================

class Timer:
    """
    Context manager that logs how long a block took.

    Usage:
        with Timer("Sanitization"):
            # code to time
            pass

    Output (DEBUG_MODE=True):
        [14:32:01.120] Starting Sanitization...
        [14:32:01.126] Sanitization took 6 ms

    Attributes:
        operation_name: Name of the operation being timed
        duration_ms: Duration in milliseconds (available after exit)
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        debug_log(f"Starting {self.operation_name}...")
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if self.duration_ms < 1000:
            duration_str = f"{self.duration_ms:.0f} ms"
        else:
            duration_str = f"{self.duration_ms / 1000:.1f} seconds"
        debug_log(f"{self.operation_name} took {duration_str}")

        return False  # Don't suppress exceptions


# =============================================================================
# Public Logging Functions
# =============================================================================

def debug_log(message: str):
    """
    Log a debug message to the trace file and console (if DEBUG_MODE).

    Args:
        message: The message to log (prefix with [MODULE] for clarity)

    Example:
        debug_log("[PIPELINE] Table Stripper: 4 changes in 0.3ms")
    """
    _debug_file_logger.write(message)

    if DEBUG_MODE:
        _logger.debug(message)


def info(message: str):
    """Log an informational message."""
    _debug_file_logger.write(f"[INFO] {message}")
    _logger.info(message)


def warning(message: str):
    """Log a warning message."""
    _debug_file_logger.write(f"[WARNING] {message}")
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only in DEBUG_MODE)
    """
    _debug_file_logger.write(f"[ERROR] {message}")
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def close_debug_log():
    """Close the debug trace file, if one was opened."""
    _debug_file_logger.close()


__all__ = [
    'debug_log',
    'info',
    'warning',
    'error',
    'close_debug_log',
    'Timer',
    'DEBUG_MODE',
]
