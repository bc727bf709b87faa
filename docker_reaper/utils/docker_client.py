"""Docker client management for Docker Resource Reaper."""

import logging
import os
from typing import Any

import docker

logger = logging.getLogger(__name__)


class DockerClientManager:
    """Creates and caches the Docker client from the environment.

    Connection settings follow the Docker CLI conventions: TLS when
    DOCKER_CERT_PATH is set, plain HTTP when only DOCKER_HOST is set, and the
    local socket otherwise.
    """

    def __init__(self):
        self._client: docker.DockerClient | None = None

    def describe_transport(self) -> str:
        """Describe how the client will connect, for log output."""
        if os.environ.get("DOCKER_CERT_PATH"):
            return "Environment variable DOCKER_CERT_PATH set. Connecting via TLS"
        if os.environ.get("DOCKER_HOST"):
            return (
                "Environment variable DOCKER_HOST set, but not DOCKER_CERT_PATH. "
                "Connecting via HTTP"
            )
        return "Environment variable DOCKER_HOST not set, connecting to local machine"

    def get_client(self) -> docker.DockerClient:
        """Get or create the Docker client."""
        if self._client is None:
            logger.debug(self.describe_transport())
            self._client = docker.from_env()
        return self._client

    @property
    def api(self) -> Any:
        """Get the low-level API client used by the reaper."""
        return self.get_client().api

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
