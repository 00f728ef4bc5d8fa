# middleflow/config.py
from dataclasses import dataclass
from typing import TypedDict

from middleflow.common.exceptions import ConfigurationError
from middleflow.constants import (
    DEFAULT_EXCEPTION_FRONT_WINDOW,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BRANCH_DEPTH,
    VALID_LOG_LEVELS,
    get_exception_front_window,
    get_json_indent,
    get_log_level,
    get_max_branch_depth,
)


class MiddleflowConfigDict(TypedDict, total=False):
    """TypedDict for middleflow configuration dictionary"""
    exception_front_window: int
    max_branch_depth: int
    log_level: str
    json_indent: int


@dataclass(frozen=True)
class MiddleflowConfig:
    """Settings shared by the validator, simulator and document I/O"""

    exception_front_window: int = DEFAULT_EXCEPTION_FRONT_WINDOW
    max_branch_depth: int = DEFAULT_MAX_BRANCH_DEPTH
    log_level: str = DEFAULT_LOG_LEVEL
    json_indent: int = DEFAULT_JSON_INDENT

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.exception_front_window < 0:
            raise ConfigurationError(
                "exception_front_window must be non-negative",
                config_key="exception_front_window",
            )
        if self.max_branch_depth < 1:
            raise ConfigurationError(
                "max_branch_depth must be at least 1",
                config_key="max_branch_depth",
            )
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log_level: {self.log_level}",
                config_key="log_level",
            )
        if self.json_indent < 0:
            raise ConfigurationError(
                "json_indent must be non-negative",
                config_key="json_indent",
            )

    @classmethod
    def from_env(cls) -> 'MiddleflowConfig':
        """Create configuration from MIDDLEFLOW_* environment variables"""
        return cls(
            exception_front_window=get_exception_front_window(),
            max_branch_depth=get_max_branch_depth(),
            log_level=get_log_level(),
            json_indent=get_json_indent(),
        )

    @classmethod
    def from_dict(cls, config_dict: MiddleflowConfigDict) -> 'MiddleflowConfig':
        """Create configuration from typed dictionary"""
        return cls(
            exception_front_window=config_dict.get('exception_front_window', DEFAULT_EXCEPTION_FRONT_WINDOW),
            max_branch_depth=config_dict.get('max_branch_depth', DEFAULT_MAX_BRANCH_DEPTH),
            log_level=config_dict.get('log_level', DEFAULT_LOG_LEVEL).upper(),
            json_indent=config_dict.get('json_indent', DEFAULT_JSON_INDENT),
        )

    def to_dict(self) -> MiddleflowConfigDict:
        """Convert configuration to typed dictionary"""
        return MiddleflowConfigDict(
            exception_front_window=self.exception_front_window,
            max_branch_depth=self.max_branch_depth,
            log_level=self.log_level,
            json_indent=self.json_indent,
        )


def get_config() -> MiddleflowConfig:
    """Read the current settings from the environment."""
    return MiddleflowConfig.from_env()
