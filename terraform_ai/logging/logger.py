"""Logging abstraction for terraform-ai."""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, TextIO
from enum import Enum
from datetime import datetime
import json
import sys


class LogLevel(str, Enum):
    """Log severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
    LogLevel.CRITICAL: 4,
}


class Logger(ABC):
    """Abstract base class for logging."""

    @abstractmethod
    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an event with optional data.

        Args:
            level: Log severity level
            event: Event name/identifier
            message: Human-readable message
            data: Optional metadata dictionary
        """
        pass

    def debug(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, event, message, data)

    def info(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, event, message, data)

    def warning(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message."""
        self.log(LogLevel.WARNING, event, message, data)

    def error(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, event, message, data)

    def critical(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log critical message."""
        self.log(LogLevel.CRITICAL, event, message, data)


class ConsoleLogger(Logger):
    """Console logger with icons and colored output, written to stderr."""

    # ANSI color codes
    COLORS = {
        LogLevel.DEBUG: "\033[36m",      # Cyan
        LogLevel.INFO: "\033[32m",       # Green
        LogLevel.WARNING: "\033[33m",    # Yellow
        LogLevel.ERROR: "\033[31m",      # Red
        LogLevel.CRITICAL: "\033[35m",   # Magenta
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    ICONS = {
        "session.started": "🚀",
        "completion.requested": "🤖",
        "completion.received": "✨",
        "session.reprompt": "🔄",
        "session.declined": "🛑",
        "session.accepted": "✅",
        "template.validated": "🔍",
        "template.invalid": "❌",
        "template.stored": "💾",
        "terraform.init": "📦",
        "terraform.apply": "🚀",
        "terraform.failed": "⚠️",
    }

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        colored: bool = True,
        show_timestamp: bool = False,
        show_data: bool = True,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize console logger.

        Args:
            min_level: Minimum log level to display
            colored: Whether to use colored output
            show_timestamp: Whether to show timestamps
            show_data: Whether to show data field
            stream: Output stream (defaults to stderr)
        """
        self.min_level = min_level
        self.stream = stream or sys.stderr
        self.colored = colored and self.stream.isatty()
        self.show_timestamp = show_timestamp
        self.show_data = show_data

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log an event to the console."""
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.min_level]:
            return

        parts = []

        if self.show_timestamp:
            timestamp = datetime.now().strftime("%H:%M:%S")
            parts.append(self._paint(timestamp, self.DIM))

        parts.append(self.ICONS.get(event, "•"))
        parts.append(self._paint(message or event, self.COLORS.get(level, "")))

        if data and self.show_data:
            key_data = self._extract_key_data(data)
            if key_data:
                parts.append(self._paint(f"({key_data})", self.DIM))

        print("  " + " ".join(parts), file=self.stream)

    def _paint(self, text: str, color: str) -> str:
        if not self.colored:
            return text
        return f"{color}{text}{self.RESET}"

    def _extract_key_data(self, data: Dict[str, Any]) -> str:
        """Extract most important data for display."""
        priority = ["iteration", "model", "shape", "max_tokens", "file", "returncode"]

        key_items = []
        for key in priority:
            if key in data:
                key_items.append(f"{key}={data[key]}")

        return ", ".join(key_items)


class NullLogger(Logger):
    """Logger that does nothing (for testing or disabling logging)."""

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Do nothing."""
        pass


class FileLogger(Logger):
    """Logger that writes JSON lines to a file."""

    def __init__(self, file_path: str, min_level: LogLevel = LogLevel.DEBUG):
        """
        Initialize file logger.

        Args:
            file_path: Path to log file
            min_level: Minimum log level to write
        """
        self.file_path = file_path
        self.min_level = min_level

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log an event to file as JSON."""
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.min_level]:
            return

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level.value,
            "event": event,
            "message": message,
        }

        if data:
            log_entry["data"] = data

        with open(self.file_path, 'a', encoding='utf-8') as f:
            f.write(json.dumps(log_entry, default=str) + '\n')


class TeeLogger(Logger):
    """Forwards every event to several loggers."""

    def __init__(self, loggers: List[Logger]):
        self.loggers = loggers

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        for logger in self.loggers:
            logger.log(level, event, message, data)
