"""Pytest configuration and shared fixtures."""

import copy
import threading
import time
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import requests
from docker.errors import APIError, NotFound

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def make_response(status_code: int, reason: str = "") -> requests.Response:
    """Build a requests.Response carrying only a status code."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = "http+docker://localhost/test"
    return response


def api_error(status_code: int, message: str = "engine error") -> APIError:
    """Build the Docker SDK exception for an HTTP status code."""
    response = make_response(status_code)
    if status_code == 404:
        return NotFound(message, response=response, explanation=message)
    return APIError(message, response=response, explanation=message)


def rfc3339(moment: datetime) -> str:
    """Format like the engine does, with nanosecond precision."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%f") + "123Z"


SUPPORTED_FILTERS = ("label", "name")


def _check_filters(filters: dict[str, list[str]] | None) -> None:
    """Reject filter names the fake engine does not know, like the engine does."""
    for filter_name in filters or {}:
        if filter_name not in SUPPORTED_FILTERS:
            raise api_error(400, f"invalid filter '{filter_name}'")


def _matches(item: dict[str, Any], name_key: str, filters: dict[str, list[str]] | None) -> bool:
    """Engine filter semantics: every label must match, any name may match."""
    for filter_name, values in (filters or {}).items():
        if filter_name == "label":
            labels = item.get("Labels") or {}
            for value in values:
                key, sep, expected = value.partition("=")
                if key not in labels or (sep and labels[key] != expected):
                    return False
        elif filter_name == "name":
            names = item.get(name_key)
            names = names if isinstance(names, list) else [names]
            if not any(value in (n or "") for n in names for value in values):
                return False
    return True


class FakeDockerAPI:
    """In-memory stand-in for ``docker.APIClient``.

    Removal calls sleep briefly so concurrent removals overlap, and every
    call is recorded in ``events`` as ``(event, id)``.
    """

    def __init__(self, removal_delay: float = 0.01):
        self.container_data: list[dict[str, Any]] = []
        self.network_data: list[dict[str, Any]] = []
        self.volume_data: list[dict[str, Any]] = []
        self.volume_warnings: list[str] | None = None
        self.removal_errors: dict[str, Exception] = {}
        self.list_error: Exception | None = None
        self.removal_delay = removal_delay
        self.events: list[tuple[str, str]] = []
        self.list_calls: list[tuple[str, dict[str, Any]]] = []
        self._lock = threading.Lock()

    # Setup helpers

    def add_container(
        self,
        container_id: str,
        name: str | None = None,
        age: timedelta | None = timedelta(hours=1),
        labels: dict[str, str] | None = None,
        networks: list[str] | None = None,
    ) -> dict[str, Any]:
        container = {
            "Id": container_id,
            "Names": [f"/{name or container_id}"],
            "Labels": labels or {},
            "State": "running",
            "NetworkSettings": {"Networks": {n: {"NetworkID": f"id-{n}"} for n in networks or []}},
        }
        if age is not None:
            container["Created"] = int((NOW - age).timestamp())
        self.container_data.append(container)
        return container

    def add_network(
        self,
        name: str,
        age: timedelta | None = timedelta(hours=1),
        labels: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        network = {"Name": name, "Id": f"id-{name}", "Labels": labels or {}, "Driver": "bridge"}
        if age is not None:
            network["Created"] = rfc3339(NOW - age)
        self.network_data.append(network)
        return network

    def add_volume(
        self,
        name: str,
        age: timedelta | None = timedelta(hours=1),
        labels: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        volume = {"Name": name, "Labels": labels or {}, "Driver": "local"}
        if age is not None:
            volume["CreatedAt"] = (NOW - age).strftime("%Y-%m-%dT%H:%M:%SZ")
        self.volume_data.append(volume)
        return volume

    def container_exists(self, container_id: str) -> bool:
        return any(c.get("Id") == container_id for c in self.container_data)

    def network_exists(self, name: str) -> bool:
        return any(n["Name"] == name for n in self.network_data)

    def volume_exists(self, name: str) -> bool:
        return any(v["Name"] == name for v in self.volume_data)

    # docker.APIClient surface

    def containers(self, all=False, filters=None, **kwargs):
        self.list_calls.append(("containers", {"all": all, "filters": filters}))
        if self.list_error is not None:
            raise self.list_error
        _check_filters(filters)
        return [copy.deepcopy(c) for c in self.container_data if _matches(c, "Names", filters)]

    def networks(self, names=None, ids=None, filters=None):
        self.list_calls.append(("networks", {"filters": filters}))
        if self.list_error is not None:
            raise self.list_error
        _check_filters(filters)
        return [copy.deepcopy(n) for n in self.network_data if _matches(n, "Name", filters)]

    def volumes(self, filters=None):
        self.list_calls.append(("volumes", {"filters": filters}))
        if self.list_error is not None:
            raise self.list_error
        _check_filters(filters)
        volumes = [copy.deepcopy(v) for v in self.volume_data if _matches(v, "Name", filters)]
        return {"Volumes": volumes or None, "Warnings": self.volume_warnings}

    def remove_container(self, container, v=False, link=False, force=False):
        self._record("remove_container:start", container)
        time.sleep(self.removal_delay)
        try:
            with self._lock:
                if container in self.removal_errors:
                    raise self.removal_errors[container]
                if not force and any(
                    c.get("Id") == container and c.get("State") == "running"
                    for c in self.container_data
                ):
                    raise api_error(409, "cannot remove a running container")
                before = len(self.container_data)
                self.container_data = [c for c in self.container_data if c.get("Id") != container]
                if len(self.container_data) == before:
                    raise api_error(404, f"No such container: {container}")
        finally:
            self._record("remove_container:end", container)

    def remove_network(self, net_id):
        self._record("remove_network:start", net_id)
        time.sleep(self.removal_delay)
        try:
            with self._lock:
                if net_id in self.removal_errors:
                    raise self.removal_errors[net_id]
                in_use = any(
                    net_id in ((c.get("NetworkSettings") or {}).get("Networks") or {})
                    for c in self.container_data
                )
                if in_use:
                    raise api_error(403, f"error while removing network: {net_id} has active endpoints")
                before = len(self.network_data)
                self.network_data = [n for n in self.network_data if n.get("Name") != net_id]
                if len(self.network_data) == before:
                    raise api_error(404, f"network {net_id} not found")
        finally:
            self._record("remove_network:end", net_id)

    def remove_volume(self, name, force=False):
        self._record("remove_volume:start", name)
        time.sleep(self.removal_delay)
        try:
            with self._lock:
                if name in self.removal_errors:
                    raise self.removal_errors[name]
                before = len(self.volume_data)
                self.volume_data = [v for v in self.volume_data if v.get("Name") != name]
                if len(self.volume_data) == before:
                    raise api_error(404, f"get {name}: no such volume")
        finally:
            self._record("remove_volume:end", name)

    def removal_calls(self) -> list[str]:
        return [resource_id for event, resource_id in self.events if event.endswith(":start")]

    def _record(self, event: str, resource_id: str) -> None:
        with self._lock:
            self.events.append((event, resource_id))


@pytest.fixture
def fake_api() -> FakeDockerAPI:
    """Fresh in-memory Docker API."""
    return FakeDockerAPI()


@pytest.fixture
def fixed_clock():
    """Clock pinned to NOW."""
    return lambda: NOW
