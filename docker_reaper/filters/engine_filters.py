"""Conversion of Filter lists into the Docker Engine filter format."""

from collections.abc import Iterable

from docker_reaper.models import Filter


def combine_filters(filters: Iterable[Filter]) -> dict[str, list[str]]:
    """
    Group filter values by filter name.

    ``[label=a, label=b, name=c]`` becomes
    ``{"label": ["a", "b"], "name": ["c"]}``. Order and duplicates are kept;
    how values under one name combine, and which names or values are
    supported, is left to the engine.

    Args:
        filters: Filters in the order they were supplied

    Returns:
        Mapping of filter name to its values
    """
    combined: dict[str, list[str]] = {}
    for engine_filter in filters:
        combined.setdefault(engine_filter.name, []).append(engine_filter.value)
    return combined
