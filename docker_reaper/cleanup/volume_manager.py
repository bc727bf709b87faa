"""Volume operations for the reaper."""

import logging
from datetime import datetime
from typing import Any

from docker_reaper.cleanup.base import ResourceManager, parse_rfc3339
from docker_reaper.models import Resource, ResourceType

logger = logging.getLogger(__name__)


class VolumeManager(ResourceManager):
    """Manages volume listing and removal.

    The volume list endpoint wraps results in ``{"Volumes": [...],
    "Warnings": [...]}``; ``Volumes`` is null when there are none.
    """

    resource_type = ResourceType.VOLUME

    def _list(self, filters: dict[str, list[str]]) -> list[dict[str, Any]]:
        response = self.api.volumes(filters=filters) or {}
        for warning in response.get("Warnings") or []:
            logger.warning(f"Encountered warning when listing volumes: {warning}")
        volumes = response.get("Volumes")
        if volumes is None:
            logger.debug("No volumes returned")
            return []
        return volumes

    def label(self, candidate: dict[str, Any]) -> str:
        return candidate.get("Name") or "(unknown name)"

    def creation_time(self, candidate: dict[str, Any]) -> datetime:
        return parse_rfc3339(candidate.get("CreatedAt"))

    def to_resource(self, candidate: dict[str, Any]) -> Resource | None:
        name = candidate.get("Name")
        if not name:
            logger.warning("Skipped volume (unknown name): missing name value")
            return None
        return Resource(resource_type=ResourceType.VOLUME, resource_id=name, name=name)

    def remove(self, resource_id: str) -> None:
        logger.debug(f"Removing volume {resource_id}")
        self.api.remove_volume(resource_id)
