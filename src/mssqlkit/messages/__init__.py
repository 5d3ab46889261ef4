"""
Message utilities for mssqlkit.

- Logger: Human-readable output formatting with colors
"""
from mssqlkit.messages.logger import KitLogger, get_logger

__all__ = ["KitLogger", "get_logger"]
