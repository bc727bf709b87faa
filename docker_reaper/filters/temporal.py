"""Temporal filter for age-based resource selection.

The Docker Engine cannot filter by age, so candidates are listed with the
engine-side filters only and narrowed here. A candidate is kept when its age
lies strictly inside (min_age, max_age): a resource exactly at either bound
is excluded, so one created on a boundary does not flip between runs.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from docker_reaper.models import InvalidAgeBound
from docker_reaper.utils.logging import ReaperLogger

if TYPE_CHECKING:
    from docker_reaper.cleanup.base import ResourceManager

UNBOUNDED = timedelta.max


def validate_age_bounds(min_age: timedelta | None, max_age: timedelta | None) -> None:
    """
    Check that an age window is non-empty.

    An absent ``min_age`` counts as zero and an absent ``max_age`` as
    unbounded.

    Raises:
        InvalidAgeBound: If min_age >= max_age
    """
    lower = min_age if min_age is not None else timedelta(0)
    upper = max_age if max_age is not None else UNBOUNDED
    if lower >= upper:
        raise InvalidAgeBound()


class TemporalFilter:
    """Keep resources whose age falls inside an open age window."""

    def __init__(self, min_age: timedelta | None = None, max_age: timedelta | None = None):
        """
        Initialize temporal filter.

        Args:
            min_age: Resources must be strictly older than this
            max_age: Resources must be strictly younger than this

        Raises:
            InvalidAgeBound: If min_age >= max_age
        """
        validate_age_bounds(min_age, max_age)
        self.min_age = min_age
        self.max_age = max_age

    @property
    def is_active(self) -> bool:
        """Whether any bound is set. An inactive filter never reads the clock."""
        return self.min_age is not None or self.max_age is not None

    def is_within_window(self, age: timedelta) -> bool:
        lower = self.min_age if self.min_age is not None else timedelta(0)
        upper = self.max_age if self.max_age is not None else UNBOUNDED
        return lower < age < upper

    def filter_candidates(
        self,
        candidates: list[dict[str, Any]],
        manager: "ResourceManager",
        clock: Callable[[], datetime],
        reaper_logger: ReaperLogger,
    ) -> list[dict[str, Any]]:
        """
        Reduce raw engine results to those inside the age window.

        Candidates whose creation time is missing, unparseable or in the
        future are skipped with a warning; they never fail the batch.

        Args:
            candidates: Raw resource descriptions returned by the engine
            manager: Resource manager that knows how to read creation times
            clock: Returns the current time; only called if a bound is set
            reaper_logger: Logger for skip decisions

        Returns:
            Candidates inside the window, in their original order
        """
        if not self.is_active:
            return list(candidates)

        now = clock()
        resource_type = str(manager.resource_type)
        retained = []
        for candidate in candidates:
            label = manager.label(candidate)
            try:
                created_at = manager.creation_time(candidate)
            except ValueError as e:
                reaper_logger.log_resource_skipped(resource_type, label, str(e))
                continue

            age = now - created_at
            if age < timedelta(0):
                reaper_logger.log_resource_skipped(
                    resource_type, label, "creation timestamp after system time"
                )
                continue

            if not self.is_within_window(age):
                reaper_logger.log_resource_skipped(
                    resource_type, label, "age outside of specified range", bad_metadata=False
                )
                continue

            retained.append(candidate)
        return retained
