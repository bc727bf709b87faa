"""Network operations for the reaper.

Networks are identified by name rather than ID.
"""

import logging
from datetime import datetime
from typing import Any

from docker_reaper.cleanup.base import ResourceManager, parse_rfc3339
from docker_reaper.models import Resource, ResourceType

logger = logging.getLogger(__name__)


class NetworkManager(ResourceManager):
    """Manages network listing and removal."""

    resource_type = ResourceType.NETWORK

    def _list(self, filters: dict[str, list[str]]) -> list[dict[str, Any]]:
        return self.api.networks(filters=filters)

    def label(self, candidate: dict[str, Any]) -> str:
        return candidate.get("Name") or "(unknown name)"

    def creation_time(self, candidate: dict[str, Any]) -> datetime:
        if not candidate.get("Name"):
            raise ValueError("missing name value")
        return parse_rfc3339(candidate.get("Created"))

    def to_resource(self, candidate: dict[str, Any]) -> Resource | None:
        name = candidate.get("Name")
        if not name:
            logger.warning("Skipped network (unknown name): missing name value")
            return None
        return Resource(resource_type=ResourceType.NETWORK, resource_id=name, name=name)

    def remove(self, resource_id: str) -> None:
        logger.debug(f"Removing network {resource_id}")
        self.api.remove_network(resource_id)
