"""Structured logging for Docker Resource Reaper.

Every scan, skip and removal decision goes through :class:`ReaperLogger`,
which writes a single formatted line to the module logger and keeps the
entry for later reporting. Skips caused by unusable metadata are logged at
WARNING so that resources the engine describes badly never drop out of
cleanup unnoticed.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from docker_reaper.models import Resource, StatusKind

logger = logging.getLogger(__name__)


class LogLevel(Enum):
    """Log levels for reaper operations."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ActionType(Enum):
    """Types of actions that can be logged."""

    SCAN = "SCAN"
    FILTER = "FILTER"
    SKIP = "SKIP"
    REMOVE = "REMOVE"
    ERROR = "ERROR"


@dataclass
class LogEntry:
    """Structured log entry."""

    timestamp: datetime
    level: LogLevel
    action: ActionType
    resource_type: str
    resource_id: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert log entry to dictionary for structured logging."""
        entry = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "action": self.action.value,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "message": self.message,
        }
        if self.details:
            entry["details"] = self.details
        return entry


_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class ReaperLogger:
    """Records and emits reaper decisions.

    Removal tasks run on worker threads; each call appends one entry and
    ``list.append`` is atomic, so entries from concurrent removals interleave
    but are never lost.
    """

    def __init__(self, dry_run: bool = False):
        """
        Initialize reaper logger.

        Args:
            dry_run: Whether operating in dry-run mode
        """
        self.dry_run = dry_run
        self._log_entries: list[LogEntry] = []

    def _log(
        self,
        level: LogLevel,
        action: ActionType,
        resource_type: str,
        resource_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> LogEntry:
        entry = LogEntry(
            timestamp=datetime.now(UTC),
            level=level,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            message=message,
            details=details or {},
        )
        self._log_entries.append(entry)

        prefix = "[DRY RUN] " if self.dry_run else ""
        log_message = (
            f"{prefix}[{action.value}] {resource_type} {resource_id}: {message}"
        )
        if entry.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in entry.details.items())
            log_message += f" ({detail_str})"

        logger.log(_LEVELS[level], log_message)
        return entry

    def log_scan_complete(self, resource_type: str, total_found: int, eligible: int) -> None:
        """Log completion of a scan and age filtering pass."""
        self._log(
            LogLevel.INFO,
            ActionType.SCAN,
            resource_type,
            "*",
            f"Scan complete: {total_found} found, {eligible} eligible",
            {"total_found": total_found, "eligible": eligible},
        )

    def log_resource_skipped(
        self,
        resource_type: str,
        resource_id: str,
        reason: str,
        bad_metadata: bool = True,
    ) -> None:
        """Log a candidate excluded from the eligible set.

        Args:
            resource_type: Type of resource
            resource_id: ID or name of the candidate
            reason: Why it was excluded
            bad_metadata: True when the engine's description of the resource
                could not be used (logged at WARNING); False for ordinary
                filtering decisions (logged at DEBUG)
        """
        self._log(
            LogLevel.WARNING if bad_metadata else LogLevel.DEBUG,
            ActionType.SKIP,
            resource_type,
            resource_id,
            f"Skipped: {reason}",
        )

    def log_cascade(self, network_name: str, container_id: str) -> None:
        """Log a network collected from a container's attachments."""
        self._log(
            LogLevel.DEBUG,
            ActionType.FILTER,
            "Network",
            network_name,
            f"Added from container {container_id}",
        )

    def log_planned_removal(self, resource: Resource) -> None:
        """Log a removal that would happen outside dry-run mode."""
        self._log(
            LogLevel.INFO,
            ActionType.REMOVE,
            str(resource.resource_type),
            resource.name,
            "Would remove",
        )

    def log_removal_result(self, resource: Resource) -> None:
        """Log the terminal status of a removal attempt."""
        if resource.status.kind is StatusKind.ERROR:
            self._log(
                LogLevel.ERROR,
                ActionType.ERROR,
                str(resource.resource_type),
                resource.name,
                str(resource.status),
                {"error_type": type(resource.status.error.cause).__name__},
            )
        else:
            self._log(
                LogLevel.INFO,
                ActionType.REMOVE,
                str(resource.resource_type),
                resource.name,
                str(resource.status),
            )

    def get_log_entries(self) -> list[LogEntry]:
        """Get all log entries recorded so far."""
        return list(self._log_entries)

    def get_error_entries(self) -> list[LogEntry]:
        """Get entries recorded at ERROR level."""
        return [entry for entry in self._log_entries if entry.level == LogLevel.ERROR]
