"""Data models for Docker Resource Reaper."""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum


class ResourceType(Enum):
    """Types of Docker resources managed by the reaper."""

    CONTAINER = "Container"
    NETWORK = "Network"
    VOLUME = "Volume"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Filter:
    """A Docker Engine filter, e.g. ``label=color=orange``.

    Filters are passed to the engine unchanged; the engine decides how values
    sharing a name combine (every ``label`` must match, any ``name`` may).
    Filters with different names are ANDed.
    """

    name: str
    value: str

    @classmethod
    def from_string(cls, text: str) -> "Filter":
        """Parse a ``NAME=VALUE`` string, splitting on the first ``=``."""
        name, sep, value = text.partition("=")
        if not sep or not name or not value:
            raise ValueError("filters must be in NAME=VALUE(=VALUE) format")
        return cls(name=name, value=value)

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


class RemovalError(Exception):
    """Error encountered while removing a single resource."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(str(cause))


class StatusKind(Enum):
    """Removal states a resource can be in."""

    ELIGIBLE = "eligible"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RemovalStatus:
    """Outcome of a removal attempt.

    ``ELIGIBLE`` is the initial state (and the final one in dry-run mode).
    The other kinds are only reached after a removal was attempted; ``ERROR``
    carries the underlying :class:`RemovalError`.
    """

    kind: StatusKind
    error: RemovalError | None = None

    @classmethod
    def eligible(cls) -> "RemovalStatus":
        return cls(StatusKind.ELIGIBLE)

    @classmethod
    def in_progress(cls) -> "RemovalStatus":
        return cls(StatusKind.IN_PROGRESS)

    @classmethod
    def success(cls) -> "RemovalStatus":
        return cls(StatusKind.SUCCESS)

    @classmethod
    def failed(cls, error: RemovalError) -> "RemovalStatus":
        return cls(StatusKind.ERROR, error)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not StatusKind.ELIGIBLE

    def __str__(self) -> str:
        if self.kind is StatusKind.ELIGIBLE:
            return "Eligible for removal"
        if self.kind is StatusKind.SUCCESS:
            return "Removed"
        if self.kind is StatusKind.IN_PROGRESS:
            return "Removal in progress"
        return f"Error: {self.error}"


@dataclass(eq=False)
class Resource:
    """A container, network or volume selected for reaping.

    Networks and volumes use their name as ``resource_id``; names are unique
    per engine and read better in output than opaque IDs.

    Equality (and hashing) only considers ``resource_type`` and
    ``resource_id`` so results can be matched by identity regardless of
    display name or status.
    """

    resource_type: ResourceType
    resource_id: str
    name: str
    status: RemovalStatus = field(default_factory=RemovalStatus.eligible)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return (
            self.resource_type == other.resource_type
            and self.resource_id == other.resource_id
        )

    def __hash__(self) -> int:
        return hash((self.resource_type, self.resource_id))


@dataclass(frozen=True)
class ReapContainersConfig:
    """Settings for a single container reap.

    Attributes:
        dry_run: Return results without removing containers or networks.
        min_age: Only containers older than this are eligible.
        max_age: Only containers younger than this are eligible.
        filters: Additional Docker Engine-supported container filters.
        reap_networks: Also remove networks attached to reaped containers.
    """

    dry_run: bool = False
    min_age: timedelta | None = None
    max_age: timedelta | None = None
    filters: tuple[Filter, ...] = ()
    reap_networks: bool = False


@dataclass(frozen=True)
class ReapNetworksConfig:
    """Settings for a single network reap."""

    dry_run: bool = False
    min_age: timedelta | None = None
    max_age: timedelta | None = None
    filters: tuple[Filter, ...] = ()


@dataclass(frozen=True)
class ReapVolumesConfig:
    """Settings for a single volume reap."""

    dry_run: bool = False
    min_age: timedelta | None = None
    max_age: timedelta | None = None
    filters: tuple[Filter, ...] = ()


class ReapError(Exception):
    """Unrecoverable error encountered during a reap iteration."""


class InvalidAgeBound(ReapError):
    """Raised when min_age is not strictly less than max_age."""

    def __init__(self, message: str = "min_age must be less than max_age"):
        super().__init__(message)


class EnumerationError(ReapError):
    """Raised when the engine cannot list candidate resources."""


class ClockError(ReapError):
    """Raised when the current time cannot be determined."""


class TaskFailure(ReapError):
    """Raised when a removal task fails to complete."""
