"""Single reap iteration for Docker Resource Reaper.

Each iteration performs a fresh scan of the engine; nothing is carried over
from previous runs. Batch-fatal errors are logged and reported in the
returned summary so the run loop can continue with the next iteration.
"""

import io
import logging
from datetime import UTC, datetime
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from docker_reaper.cleanup.engine import CleanupEngine
from docker_reaper.models import ReapError, Resource, StatusKind
from docker_reaper.utils.config import ReaperConfig

logger = logging.getLogger(__name__)

RESOURCE_KINDS = ("containers", "networks", "volumes")

STATUS_COLUMN_WIDTH = 80


def render_resource_table(resources: list[Resource]) -> str:
    """Render resources as a text table (Resource Type, Name, Status)."""
    table = Table(box=box.SQUARE, show_lines=False)
    table.add_column("Resource Type")
    table.add_column("Name")
    table.add_column("Status", max_width=STATUS_COLUMN_WIDTH, overflow="fold")
    for resource in resources:
        table.add_row(str(resource.resource_type), resource.name, str(resource.status))

    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None, force_terminal=False)
    console.print(table)
    return buffer.getvalue().rstrip("\n")


def run_reap(engine: CleanupEngine, kind: str, config: ReaperConfig) -> list[Resource]:
    """Dispatch to the orchestrator for ``kind``."""
    if kind == "containers":
        return engine.reap_containers(config.containers_config())
    if kind == "networks":
        return engine.reap_networks(config.networks_config())
    if kind == "volumes":
        return engine.reap_volumes(config.volumes_config())
    raise ValueError(f"Unknown resource kind: {kind}")


def execute_reaper(engine: CleanupEngine, kind: str, config: ReaperConfig) -> dict[str, Any]:
    """
    Execute one reap iteration.

    Args:
        engine: Cleanup engine bound to a Docker client
        kind: One of "containers", "networks", "volumes"
        config: Reaper configuration

    Returns:
        Execution summary
    """
    logger.info(f"Starting new run ({datetime.now(UTC).isoformat()})")
    if config.dry_run:
        logger.warning("Dry run: no resources will be removed")

    try:
        resources = run_reap(engine, kind, config)
    except ReapError as e:
        logger.error(str(e))
        return {"dry_run": config.dry_run, "error": str(e)}

    logger.info(f"Found {len(resources)} matching resources")
    if resources:
        logger.info(f"\n{render_resource_table(resources)}")

    counts = {status_kind.value: 0 for status_kind in StatusKind}
    for resource in resources:
        counts[resource.status.kind.value] += 1

    return {
        "dry_run": config.dry_run,
        "resources_found": len(resources),
        "resources_removed": counts[StatusKind.SUCCESS.value],
        "resources_in_progress": counts[StatusKind.IN_PROGRESS.value],
        "errors": counts[StatusKind.ERROR.value],
    }
