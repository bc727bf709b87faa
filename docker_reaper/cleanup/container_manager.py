"""Container operations for the reaper.

Containers are listed in every state (running ones included) and removed
with ``force=True``. Their creation time is an integer Unix timestamp.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from docker_reaper.cleanup.base import ResourceManager
from docker_reaper.models import Resource, ResourceType

logger = logging.getLogger(__name__)


class ContainerManager(ResourceManager):
    """Manages container listing and removal."""

    resource_type = ResourceType.CONTAINER

    def _list(self, filters: dict[str, list[str]]) -> list[dict[str, Any]]:
        return self.api.containers(all=True, filters=filters)

    def label(self, candidate: dict[str, Any]) -> str:
        return candidate.get("Id") or "unknown ID"

    def creation_time(self, candidate: dict[str, Any]) -> datetime:
        created = candidate.get("Created")
        if created is None:
            raise ValueError("missing creation timestamp")
        if isinstance(created, bool) or not isinstance(created, int):
            raise ValueError(f"unexpected creation timestamp {created!r}")
        if created < 0:
            raise ValueError("negative creation timestamp")
        try:
            return datetime.fromtimestamp(created, UTC)
        except (OverflowError, OSError) as e:
            raise ValueError(f"creation timestamp out of range: {created}") from e

    def to_resource(self, candidate: dict[str, Any]) -> Resource | None:
        container_id = candidate.get("Id")
        if not container_id:
            logger.warning("Skipped container (unknown ID): missing ID value")
            return None
        names = candidate.get("Names") or []
        # The engine reports names with a leading slash ("/web-1").
        name = names[0].lstrip("/") if names and names[0] else container_id
        return Resource(
            resource_type=ResourceType.CONTAINER,
            resource_id=container_id,
            name=name or container_id,
        )

    def attached_network_names(self, candidate: dict[str, Any]) -> list[str]:
        """
        Get the names of the networks a container is attached to.

        The engine requires network names to be unique, so the name serves as
        the network's identifier.
        """
        network_settings = candidate.get("NetworkSettings") or {}
        networks = network_settings.get("Networks") or {}
        return list(networks.keys())

    def remove(self, resource_id: str) -> None:
        logger.debug(f"Removing container {resource_id}")
        self.api.remove_container(resource_id, force=True)
