"""Reap orchestration for containers, networks and volumes.

Each reap runs the same pipeline, parameterized by a ResourceManager:

1. Validate the age window (before any engine call)
2. Combine filters into the engine format
3. List candidates with engine-side filters only
4. Narrow candidates to the age window
5. (containers only) Collect attached networks when cascading
6. Return the eligible resources in dry-run mode, otherwise remove them

Removals are grouped by kind and the groups run one after another:
containers, then networks, then volumes. A network with an active
container endpoint cannot be removed, so every container removal must have
completed before the first network removal starts.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from docker_reaper.cleanup.base import ResourceManager
from docker_reaper.cleanup.batch_processor import BatchProcessor
from docker_reaper.cleanup.container_manager import ContainerManager
from docker_reaper.cleanup.dry_run import DryRunExecutor, DryRunReport
from docker_reaper.cleanup.network_manager import NetworkManager
from docker_reaper.cleanup.volume_manager import VolumeManager
from docker_reaper.filters import TemporalFilter, combine_filters
from docker_reaper.models import (
    ClockError,
    ReapContainersConfig,
    ReapNetworksConfig,
    ReapVolumesConfig,
    Resource,
    ResourceType,
)
from docker_reaper.utils.logging import LogEntry, ReaperLogger

logger = logging.getLogger(__name__)

AgeWindowConfig = ReapContainersConfig | ReapNetworksConfig | ReapVolumesConfig


def utc_now() -> datetime:
    return datetime.now(UTC)


class CleanupEngine:
    """Runs reaps against a Docker engine.

    The engine keeps no state between reaps apart from the log and dry-run
    report of the most recent one.
    """

    def __init__(
        self,
        docker_api: Any,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize cleanup engine.

        Args:
            docker_api: Low-level Docker API client (``docker.APIClient``)
            clock: Returns the current UTC time; defaults to the system clock
        """
        self.container_manager = ContainerManager(docker_api)
        self.network_manager = NetworkManager(docker_api)
        self.volume_manager = VolumeManager(docker_api)
        self.clock = clock or utc_now
        self._last_reaper_logger: ReaperLogger | None = None
        self._last_dry_run_report: DryRunReport | None = None

    def reap_containers(self, config: ReapContainersConfig) -> list[Resource]:
        """
        Reap containers, optionally cascading to their networks.

        Args:
            config: Container reap settings

        Returns:
            Eligible containers followed by any cascaded networks, with
            statuses set (left at Eligible in dry-run mode)

        Raises:
            ReapError: On invalid age bounds, enumeration failure, clock
                failure or a removal task that fails to complete
        """
        reaper_logger = self._start(config)
        selected = self._select(self.container_manager, config, reaper_logger)
        resources = [resource for _, resource in selected]
        if config.reap_networks:
            resources.extend(self._collect_networks(selected, reaper_logger))
        return self._finish(resources, config.dry_run, reaper_logger)

    def reap_networks(self, config: ReapNetworksConfig) -> list[Resource]:
        """Reap networks. See :meth:`reap_containers` for errors."""
        reaper_logger = self._start(config)
        selected = self._select(self.network_manager, config, reaper_logger)
        return self._finish([resource for _, resource in selected], config.dry_run, reaper_logger)

    def reap_volumes(self, config: ReapVolumesConfig) -> list[Resource]:
        """Reap volumes. See :meth:`reap_containers` for errors."""
        reaper_logger = self._start(config)
        selected = self._select(self.volume_manager, config, reaper_logger)
        return self._finish([resource for _, resource in selected], config.dry_run, reaper_logger)

    def get_last_log_entries(self) -> list[LogEntry]:
        """Get the structured log of the most recent reap."""
        if self._last_reaper_logger is None:
            return []
        return self._last_reaper_logger.get_log_entries()

    def get_last_dry_run_report(self) -> DryRunReport | None:
        """Get the report of the most recent reap if it was a dry run."""
        return self._last_dry_run_report

    def _start(self, config: AgeWindowConfig) -> ReaperLogger:
        self._last_reaper_logger = ReaperLogger(dry_run=config.dry_run)
        self._last_dry_run_report = None
        return self._last_reaper_logger

    def _now(self) -> datetime:
        try:
            now = self.clock()
        except (OSError, OverflowError, ValueError) as e:
            raise ClockError(f"Failed to read system time: {e}") from e
        if now.tzinfo is None:
            raise ClockError("System clock returned a time without a timezone")
        return now

    def _select(
        self,
        manager: ResourceManager,
        config: AgeWindowConfig,
        reaper_logger: ReaperLogger,
    ) -> list[tuple[dict[str, Any], Resource]]:
        """Enumerate and age-filter candidates, pairing each with its Resource."""
        temporal_filter = TemporalFilter(min_age=config.min_age, max_age=config.max_age)

        candidates = manager.list_candidates(combine_filters(config.filters))
        in_window = temporal_filter.filter_candidates(
            candidates, manager, self._now, reaper_logger
        )

        selected = []
        for candidate in in_window:
            resource = manager.to_resource(candidate)
            if resource is not None:
                selected.append((candidate, resource))

        reaper_logger.log_scan_complete(
            str(manager.resource_type), len(candidates), len(selected)
        )
        return selected

    def _collect_networks(
        self,
        selected: list[tuple[dict[str, Any], Resource]],
        reaper_logger: ReaperLogger,
    ) -> list[Resource]:
        """
        Collect the distinct networks attached to eligible containers.

        Networks are keyed by name, deduplicated across containers, and kept
        in first-seen order so output is stable between runs.
        """
        network_names: dict[str, None] = {}
        for candidate, container in selected:
            for network_name in self.container_manager.attached_network_names(candidate):
                if network_name not in network_names:
                    network_names[network_name] = None
                    reaper_logger.log_cascade(network_name, container.resource_id)

        return [
            Resource(resource_type=ResourceType.NETWORK, resource_id=name, name=name)
            for name in network_names
        ]

    def _finish(
        self,
        resources: list[Resource],
        dry_run: bool,
        reaper_logger: ReaperLogger,
    ) -> list[Resource]:
        if dry_run:
            self._last_dry_run_report = DryRunExecutor(reaper_logger).execute_dry_run(resources)
            return resources

        processor = BatchProcessor(reaper_logger)
        results: list[Resource] = []
        for manager in (self.container_manager, self.network_manager, self.volume_manager):
            group = [r for r in resources if r.resource_type is manager.resource_type]
            results.extend(processor.process_removals(group, manager.remove))
        return results


def reap_containers(
    docker_api: Any,
    config: ReapContainersConfig,
    clock: Callable[[], datetime] | None = None,
) -> list[Resource]:
    """Reap containers matching ``config``. See CleanupEngine.reap_containers."""
    return CleanupEngine(docker_api, clock=clock).reap_containers(config)


def reap_networks(
    docker_api: Any,
    config: ReapNetworksConfig,
    clock: Callable[[], datetime] | None = None,
) -> list[Resource]:
    """Reap networks matching ``config``. See CleanupEngine.reap_networks."""
    return CleanupEngine(docker_api, clock=clock).reap_networks(config)


def reap_volumes(
    docker_api: Any,
    config: ReapVolumesConfig,
    clock: Callable[[], datetime] | None = None,
) -> list[Resource]:
    """Reap volumes matching ``config``. See CleanupEngine.reap_volumes."""
    return CleanupEngine(docker_api, clock=clock).reap_volumes(config)
