"""Mapping of engine removal errors to removal statuses.

Shared by every resource kind so the rules below hold everywhere:

- 404 (not found): the resource is already gone, which is the desired end
  state, so the removal counts as a success.
- 409 (conflict): the engine is already removing the resource.
- anything else: a per-resource error that does not abort the batch.
"""

from docker_reaper.models import RemovalError, RemovalStatus

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def classify_engine_error(error: Exception) -> RemovalStatus:
    """
    Classify an engine error raised by a removal call.

    Args:
        error: Exception raised by the Docker SDK. ``docker.errors.APIError``
            exposes the HTTP status as ``status_code``; transport errors have
            none and are always treated as failures.

    Returns:
        The terminal RemovalStatus for the resource
    """
    status_code = getattr(error, "status_code", None)
    if status_code == HTTP_NOT_FOUND:
        return RemovalStatus.success()
    if status_code == HTTP_CONFLICT:
        return RemovalStatus.in_progress()
    return RemovalStatus.failed(RemovalError(error))
