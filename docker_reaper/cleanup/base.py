"""Per-kind capabilities shared by the reap pipeline."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from dateutil.parser import isoparse
from docker.errors import DockerException
from requests.exceptions import RequestException

from docker_reaper.models import EnumerationError, Resource, ResourceType

logger = logging.getLogger(__name__)

# Errors raised by the Docker SDK for engine-side failures. RequestException
# covers an unreachable daemon, which the SDK does not wrap.
ENGINE_ERRORS = (DockerException, RequestException)


def parse_rfc3339(timestamp: str | None) -> datetime:
    """
    Parse an engine RFC 3339 timestamp.

    Fractional seconds beyond microseconds are truncated. A timestamp without
    an offset is taken as UTC.

    Raises:
        ValueError: If the timestamp is missing or unparseable
    """
    if not timestamp:
        raise ValueError("missing creation timestamp")
    try:
        created_at = isoparse(timestamp)
    except (ValueError, OverflowError) as e:
        raise ValueError("failed to parse creation timestamp as RFC3339") from e
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return created_at


class ResourceManager(ABC):
    """Engine operations for one kind of Docker resource.

    Subclasses adapt the low-level Docker API client to the three things the
    reap pipeline needs: listing candidates, reading their creation time, and
    removing them.
    """

    resource_type: ResourceType

    def __init__(self, docker_api: Any):
        """
        Initialize resource manager.

        Args:
            docker_api: Low-level Docker API client (``docker.APIClient``)
        """
        self.api = docker_api

    def list_candidates(self, filters: dict[str, list[str]]) -> list[dict[str, Any]]:
        """
        List every resource of this kind matching the engine-side filters.

        Raises:
            EnumerationError: If the engine cannot be queried
        """
        try:
            candidates = self._list(filters)
        except ENGINE_ERRORS as e:
            raise EnumerationError(f"Failed to list {self.resource_type.value.lower()}s: {e}") from e
        logger.debug(f"Engine returned {len(candidates)} {self.resource_type.value.lower()}(s)")
        return candidates

    @abstractmethod
    def _list(self, filters: dict[str, list[str]]) -> list[dict[str, Any]]:
        """Query the engine. Engine errors propagate."""
        raise NotImplementedError

    @abstractmethod
    def label(self, candidate: dict[str, Any]) -> str:
        """Best available identifier of a raw candidate, for log messages."""
        raise NotImplementedError

    @abstractmethod
    def creation_time(self, candidate: dict[str, Any]) -> datetime:
        """
        Read a candidate's creation time.

        Raises:
            ValueError: If the creation time is missing or unusable
        """
        raise NotImplementedError

    @abstractmethod
    def to_resource(self, candidate: dict[str, Any]) -> Resource | None:
        """Build an eligible Resource, or None if the candidate has no usable ID."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, resource_id: str) -> None:
        """Remove a resource. Engine errors propagate for classification."""
        raise NotImplementedError
