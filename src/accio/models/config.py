"""
Configuration data models for Accio.

This module defines the configuration structures for the traversal
strategy, the progress spinner, and logging.
"""

import logging
import os
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator


LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class SearchConfig(BaseModel):
    """
    Configuration for the traversal strategy.

    Attributes:
        parallel: Use the parallel walker; None leaves the choice to the caller
        max_workers: Worker thread count for parallel mode (None for default)
    """

    parallel: Optional[bool] = Field(None, description="Use the parallel walker")
    max_workers: Optional[int] = Field(None, gt=0, description="Worker threads for parallel mode")

    def get_effective_workers(self) -> int:
        """Get the worker count the thread pool will actually use."""
        if self.max_workers:
            return self.max_workers
        return min(32, (os.cpu_count() or 1) + 4)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class ProgressConfig(BaseModel):
    """
    Configuration for the directory-count spinner shown during a search.

    Attributes:
        enabled: Whether to render the spinner at all
        tick_chars: Spinner animation frames
    """

    enabled: bool = Field(True, description="Whether to render the spinner")
    tick_chars: str = Field("/|\\- ", min_length=2, description="Spinner animation frames")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class LoggingConfig(BaseModel):
    """
    Configuration for log output.

    Attributes:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Format string for the stderr handler
    """

    level: str = Field("WARNING", description="Minimum log level")
    format: str = Field(DEFAULT_LOG_FORMAT, min_length=1, description="Log record format")

    @field_validator('level', mode='before')
    @classmethod
    def validate_level(cls, v) -> str:
        """Validate and normalize the level name."""
        if isinstance(v, int):
            v = logging.getLevelName(v)
        if not isinstance(v, str) or v.strip().upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return v.strip().upper()

    def get_level_number(self) -> int:
        return getattr(logging, self.level)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class FinderConfig(BaseModel):
    """
    Main configuration class for Accio.

    Attributes:
        search: Traversal strategy settings
        progress: Progress spinner settings
        logging: Log output settings
    """

    search: SearchConfig = Field(default_factory=SearchConfig, description="Traversal strategy settings")
    progress: ProgressConfig = Field(default_factory=ProgressConfig, description="Progress spinner settings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Log output settings")

    def validate_configuration(self) -> List[str]:
        """
        Check for settings that are valid but probably unintended.

        Returns:
            List of warning messages
        """
        warnings = []

        if self.search.max_workers and self.search.parallel is False:
            warnings.append("max_workers is set but parallel search is disabled")

        cpu_count = os.cpu_count() or 1
        if self.search.max_workers and self.search.max_workers > cpu_count * 16:
            warnings.append(
                f"Very high max_workers ({self.search.max_workers}) for {cpu_count} CPUs"
            )

        if self.logging.level == 'DEBUG':
            warnings.append("DEBUG logging reports every unreadable directory and may be noisy")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'search': self.search.to_dict(),
            'progress': self.progress.to_dict(),
            'logging': self.logging.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FinderConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        if self.search.parallel is None:
            mode = "ask"
        else:
            mode = "parallel" if self.search.parallel else "sequential"
        parts = [f"Mode: {mode}"]
        parts.append(f"Workers: {self.search.get_effective_workers()}")
        parts.append(f"Progress: {self.progress.enabled}")
        parts.append(f"Log level: {self.logging.level}")
        return " | ".join(parts)


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check the top-level shape of raw configuration data.

    Args:
        config_data: Raw configuration dictionary

    Returns:
        The configuration data with empty sections dropped

    Raises:
        ValueError: If unknown sections are present or a section is not a mapping
    """
    known_sections = set(FinderConfig.model_fields)
    unknown = sorted(set(config_data) - known_sections)
    if unknown:
        raise ValueError(f"Unknown configuration sections: {', '.join(unknown)}")

    for section in known_sections:
        value = config_data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Section '{section}' must be a mapping, got {type(value).__name__}")

    return {key: value for key, value in config_data.items() if value is not None}
