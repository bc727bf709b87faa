"""Dry-run execution mode for safe resource identification.

In dry-run mode the reaper identifies cleanup candidates exactly as it would
in live mode but never issues a removal call. Each eligible resource is
logged as a planned action and summarised in a :class:`DryRunReport`.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from docker_reaper.models import Resource, ResourceType
from docker_reaper.utils.logging import ReaperLogger

logger = logging.getLogger(__name__)


@dataclass
class DryRunReport:
    """Report of planned removals in dry-run mode."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    containers_to_remove: list[str] = field(default_factory=list)
    networks_to_remove: list[str] = field(default_factory=list)
    volumes_to_remove: list[str] = field(default_factory=list)

    def total_resources(self) -> int:
        """Get total number of resources that would be removed."""
        return (
            len(self.containers_to_remove)
            + len(self.networks_to_remove)
            + len(self.volumes_to_remove)
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "total_resources": self.total_resources(),
            "containers_to_remove": self.containers_to_remove,
            "networks_to_remove": self.networks_to_remove,
            "volumes_to_remove": self.volumes_to_remove,
        }


class DryRunExecutor:
    """Logs planned removals without touching the engine."""

    def __init__(self, reaper_logger: ReaperLogger | None = None):
        self.reaper_logger = reaper_logger or ReaperLogger(dry_run=True)

    def execute_dry_run(self, resources: list[Resource]) -> DryRunReport:
        """
        Simulate removal of the given resources.

        Statuses are left at Eligible.

        Args:
            resources: Eligible resources

        Returns:
            DryRunReport listing the resources by type
        """
        report = DryRunReport()
        logger.info(f"[DRY RUN] Starting simulation for {len(resources)} resources")

        for resource in resources:
            self.reaper_logger.log_planned_removal(resource)
            if resource.resource_type is ResourceType.CONTAINER:
                report.containers_to_remove.append(resource.name)
            elif resource.resource_type is ResourceType.NETWORK:
                report.networks_to_remove.append(resource.name)
            else:
                report.volumes_to_remove.append(resource.name)

        logger.info(
            f"[DRY RUN] Would remove {len(report.containers_to_remove)} container(s), "
            f"{len(report.networks_to_remove)} network(s), "
            f"{len(report.volumes_to_remove)} volume(s)"
        )
        return report
