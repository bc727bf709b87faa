"""Resource filtering modules for selecting Docker resources to reap.

- combine_filters: groups Filter pairs into the engine's filter format
- TemporalFilter: narrows engine results to an open (min_age, max_age) window
"""

from docker_reaper.filters.engine_filters import combine_filters
from docker_reaper.filters.temporal import TemporalFilter, validate_age_bounds

__all__ = ["combine_filters", "TemporalFilter", "validate_age_bounds"]
