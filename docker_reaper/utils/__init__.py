"""Utility modules for Docker client management, configuration and logging."""

from docker_reaper.utils.config import ConfigurationError, ReaperConfig, configure_logging
from docker_reaper.utils.docker_client import DockerClientManager
from docker_reaper.utils.durations import format_duration, parse_duration
from docker_reaper.utils.logging import (
    ActionType,
    LogEntry,
    LogLevel,
    ReaperLogger,
)

__all__ = [
    "ConfigurationError",
    "DockerClientManager",
    "ReaperConfig",
    "configure_logging",
    "format_duration",
    "parse_duration",
    "ActionType",
    "LogEntry",
    "LogLevel",
    "ReaperLogger",
]
