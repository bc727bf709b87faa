"""Batch processor for concurrent resource removals.

Key features:
- Every removal in a group is submitted at once; there is no concurrency cap
- The caller blocks until the whole group has finished
- Per-resource failures are recorded on the resource and never stop siblings
- Results keep the input order, not completion order

Note: Uses ThreadPoolExecutor (not asyncio) because the Docker SDK is
synchronous. asyncio.gather with blocking SDK calls would execute
sequentially.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from docker_reaper.cleanup.base import ENGINE_ERRORS
from docker_reaper.cleanup.classify import classify_engine_error
from docker_reaper.models import RemovalStatus, Resource, TaskFailure
from docker_reaper.utils.logging import ReaperLogger

logger = logging.getLogger(__name__)


class BatchProcessor:
    """Remove groups of resources concurrently."""

    def __init__(self, reaper_logger: ReaperLogger | None = None):
        """
        Initialize batch processor.

        Args:
            reaper_logger: Logger that records each removal outcome
        """
        self.reaper_logger = reaper_logger or ReaperLogger()

    def process_removals(
        self,
        resources: list[Resource],
        remove_func: Callable[[str], None],
    ) -> list[Resource]:
        """
        Remove a group of resources and record each outcome on its status.

        Args:
            resources: Resources to remove
            remove_func: Removes one resource by ID; raises an engine error
                on failure

        Returns:
            The same Resource objects, in input order, with terminal statuses

        Raises:
            TaskFailure: If a removal task raised something other than an
                engine error. Raised only after the whole group has finished.
        """
        if not resources:
            return []

        resource_type = resources[0].resource_type
        logger.info(f"Removing {len(resources)} {resource_type}(s)")

        with ThreadPoolExecutor(max_workers=len(resources)) as executor:
            futures = [
                executor.submit(self._safe_remove, remove_func, resource)
                for resource in resources
            ]

        failures = []
        for resource, future in zip(resources, futures):
            exception = future.exception()
            if exception is not None:
                failures.append((resource, exception))

        if failures:
            resource, exception = failures[0]
            raise TaskFailure(
                f"Removal task for {resource.resource_type} {resource.name} failed to complete: "
                f"{exception}"
            ) from exception

        return list(resources)

    def _safe_remove(self, remove_func: Callable[[str], None], resource: Resource) -> Resource:
        """Remove one resource, classifying engine errors into its status."""
        try:
            remove_func(resource.resource_id)
        except ENGINE_ERRORS as e:
            resource.status = classify_engine_error(e)
        else:
            resource.status = RemovalStatus.success()
        self.reaper_logger.log_removal_result(resource)
        return resource
