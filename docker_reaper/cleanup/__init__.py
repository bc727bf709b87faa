"""Cleanup modules for resource listing and removal."""

from docker_reaper.cleanup.batch_processor import BatchProcessor
from docker_reaper.cleanup.classify import classify_engine_error
from docker_reaper.cleanup.container_manager import ContainerManager
from docker_reaper.cleanup.dry_run import DryRunExecutor, DryRunReport
from docker_reaper.cleanup.engine import (
    CleanupEngine,
    reap_containers,
    reap_networks,
    reap_volumes,
)
from docker_reaper.cleanup.network_manager import NetworkManager
from docker_reaper.cleanup.volume_manager import VolumeManager

__all__ = [
    "CleanupEngine",
    "ContainerManager",
    "NetworkManager",
    "VolumeManager",
    "BatchProcessor",
    "classify_engine_error",
    "DryRunExecutor",
    "DryRunReport",
    "reap_containers",
    "reap_networks",
    "reap_volumes",
]
