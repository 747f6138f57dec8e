"""Logging module for terraform-ai."""

from .logger import (
    Logger,
    LogLevel,
    ConsoleLogger,
    NullLogger,
    FileLogger,
    TeeLogger,
)

__all__ = [
    "Logger",
    "LogLevel",
    "ConsoleLogger",
    "NullLogger",
    "FileLogger",
    "TeeLogger",
]
