"""Configuration management for Docker Resource Reaper.

Settings are read from environment variables and can then be overridden by
command-line flags.

Key configuration options:
- REAPER_EVERY: Interval between runs as a Go-style duration (default 60s)
- REAPER_ONCE: Run a single iteration and exit
- REAPER_DRY_RUN / DRY_RUN: Identify resources without removing them
- REAPER_MIN_AGE / REAPER_MAX_AGE: Age window for eligible resources
- LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

Docker connection settings use the standard DOCKER_HOST, DOCKER_TLS_VERIFY
and DOCKER_CERT_PATH variables.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta

from docker_reaper.models import (
    Filter,
    ReapContainersConfig,
    ReapNetworksConfig,
    ReapVolumesConfig,
)
from docker_reaper.utils.durations import parse_duration

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

TRUTHY_VALUES = ("true", "1", "yes")

DEFAULT_INTERVAL = timedelta(seconds=60)

_config_logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration validation errors."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


def _parse_bool(value: str | None) -> bool:
    return (value or "").lower().strip() in TRUTHY_VALUES


def _parse_optional_duration(name: str, value: str | None) -> timedelta | None:
    if value is None or not value.strip():
        return None
    try:
        return parse_duration(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {name}: {e}") from e


@dataclass
class ReaperConfig:
    """Configuration for reaper execution.

    Attributes:
        every: Interval to wait after each run.
        once: Run a single iteration and exit.
        dry_run: Identify eligible resources without removing them.
        log_level: Log level for output.
        min_age: Only resources older than this are eligible.
        max_age: Only resources younger than this are eligible.
        filters: Docker Engine-supported filters.
        reap_networks: Also remove networks attached to reaped containers.
    """

    every: timedelta = DEFAULT_INTERVAL
    once: bool = False
    dry_run: bool = False
    log_level: str = "INFO"
    min_age: timedelta | None = None
    max_age: timedelta | None = None
    filters: list[Filter] = field(default_factory=list)
    reap_networks: bool = False

    @classmethod
    def from_environment(cls, validate: bool = True) -> "ReaperConfig":
        """Create configuration from environment variables.

        Args:
            validate: If True, validates the configuration and raises
                ConfigurationError if invalid.

        Returns:
            ReaperConfig instance populated from environment variables.

        Raises:
            ConfigurationError: If a value cannot be parsed, or validation is
                enabled and the configuration is invalid.
        """
        config = cls()

        every = _parse_optional_duration("REAPER_EVERY", os.environ.get("REAPER_EVERY"))
        if every is not None:
            config.every = every

        config.once = _parse_bool(os.environ.get("REAPER_ONCE"))

        # DRY_RUN is accepted for compatibility with generic deploy tooling
        dry_run_value = os.environ.get("REAPER_DRY_RUN", os.environ.get("DRY_RUN"))
        config.dry_run = _parse_bool(dry_run_value)

        config.min_age = _parse_optional_duration("REAPER_MIN_AGE", os.environ.get("REAPER_MIN_AGE"))
        config.max_age = _parse_optional_duration("REAPER_MAX_AGE", os.environ.get("REAPER_MAX_AGE"))

        log_level_value = os.environ.get("LOG_LEVEL", "INFO").upper().strip()
        if log_level_value in VALID_LOG_LEVELS:
            config.log_level = log_level_value
        else:
            _config_logger.warning(f"Invalid LOG_LEVEL '{log_level_value}', defaulting to INFO")
            config.log_level = "INFO"

        if validate:
            config.raise_for_errors()

        return config

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        if self.every <= timedelta(0):
            errors.append("Run interval must be a positive duration")

        lower = self.min_age if self.min_age is not None else timedelta(0)
        upper = self.max_age if self.max_age is not None else timedelta.max
        if lower >= upper:
            errors.append("min_age must be less than max_age")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")

        return errors

    def raise_for_errors(self) -> None:
        """Raise ConfigurationError if validate() reports any errors."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(f"Configuration validation failed: {errors}", errors=errors)

    def get_numeric_log_level(self) -> int:
        """Get the numeric log level for use with logging module."""
        return getattr(logging, self.log_level, logging.INFO)

    def containers_config(self) -> ReapContainersConfig:
        return ReapContainersConfig(
            dry_run=self.dry_run,
            min_age=self.min_age,
            max_age=self.max_age,
            filters=tuple(self.filters),
            reap_networks=self.reap_networks,
        )

    def networks_config(self) -> ReapNetworksConfig:
        return ReapNetworksConfig(
            dry_run=self.dry_run,
            min_age=self.min_age,
            max_age=self.max_age,
            filters=tuple(self.filters),
        )

    def volumes_config(self) -> ReapVolumesConfig:
        return ReapVolumesConfig(
            dry_run=self.dry_run,
            min_age=self.min_age,
            max_age=self.max_age,
            filters=tuple(self.filters),
        )


def configure_logging(config: ReaperConfig | None = None) -> logging.Logger:
    """Configure logging based on LOG_LEVEL environment variable or config.

    Args:
        config: Optional ReaperConfig instance. If not provided, reads from environment.

    Returns:
        Configured logger instance for the reaper.
    """
    if config is None:
        log_level_str = os.environ.get("LOG_LEVEL", "INFO").upper().strip()
        if log_level_str not in VALID_LOG_LEVELS:
            logging.warning(f"Invalid LOG_LEVEL '{log_level_str}', defaulting to INFO")
            log_level_str = "INFO"
    else:
        log_level_str = config.log_level

    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    reaper_logger = logging.getLogger("docker_reaper")
    reaper_logger.setLevel(log_level)

    return reaper_logger
