"""Docker Resource Reaper - removes expired containers, networks and volumes."""

__version__ = "1.1.0"

from docker_reaper.models import (
    Filter,
    InvalidAgeBound,
    ReapContainersConfig,
    ReapError,
    ReapNetworksConfig,
    ReapVolumesConfig,
    RemovalError,
    RemovalStatus,
    Resource,
    ResourceType,
    StatusKind,
)
from docker_reaper.cleanup.engine import (
    CleanupEngine,
    reap_containers,
    reap_networks,
    reap_volumes,
)

__all__ = [
    "CleanupEngine",
    "Filter",
    "InvalidAgeBound",
    "ReapContainersConfig",
    "ReapError",
    "ReapNetworksConfig",
    "ReapVolumesConfig",
    "RemovalError",
    "RemovalStatus",
    "Resource",
    "ResourceType",
    "StatusKind",
    "reap_containers",
    "reap_networks",
    "reap_volumes",
]
