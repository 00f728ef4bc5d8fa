"""Constants and default values for middleflow configuration.

This module centralizes all configuration constants and environment variable
settings used by the simulator, validator and document I/O.
"""

import os
from typing import Final

# =============================================================================
# Environment Variable Names
# =============================================================================

ENV_VAR_PREFIX: Final[str] = "MIDDLEFLOW_"

# Validation settings
ENV_EXCEPTION_FRONT_WINDOW: Final[str] = f"{ENV_VAR_PREFIX}EXCEPTION_FRONT_WINDOW"

# Simulation settings
ENV_MAX_BRANCH_DEPTH: Final[str] = f"{ENV_VAR_PREFIX}MAX_BRANCH_DEPTH"

# Output settings
ENV_LOG_LEVEL: Final[str] = f"{ENV_VAR_PREFIX}LOG_LEVEL"
ENV_JSON_INDENT: Final[str] = f"{ENV_VAR_PREFIX}JSON_INDENT"


# =============================================================================
# Default Configuration Values
# =============================================================================

# ExceptionHandling at a sorted index >= this value is reported as late.
DEFAULT_EXCEPTION_FRONT_WINDOW: Final[int] = 3
DEFAULT_MAX_BRANCH_DEPTH: Final[int] = 32
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_JSON_INDENT: Final[int] = 2


# =============================================================================
# File Format Constants
# =============================================================================

FILE_EXT_YAML: Final[str] = "yaml"
FILE_EXT_YML: Final[str] = "yml"
FILE_EXT_JSON: Final[str] = "json"

SUPPORTED_EXTENSIONS: Final[tuple[str, ...]] = (
    FILE_EXT_YAML,
    FILE_EXT_YML,
    FILE_EXT_JSON,
)

VALID_LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# Helper Functions
# =============================================================================


def get_env_int(env_var: str, default: int) -> int:
    """
    Get integer value from environment variable.

    Args:
        env_var: Environment variable name
        default: Default value if not set

    Returns:
        Integer value from environment or default
    """
    try:
        return int(os.getenv(env_var, str(default)))
    except ValueError:
        return default


def get_env_str(env_var: str, default: str) -> str:
    """
    Get string value from environment variable.

    Args:
        env_var: Environment variable name
        default: Default value if not set

    Returns:
        String value from environment or default
    """
    return os.getenv(env_var, default)


# =============================================================================
# Configuration Value Getters (reads from environment)
# =============================================================================


def get_exception_front_window() -> int:
    """Get the ExceptionHandling front window from environment or default."""
    return get_env_int(ENV_EXCEPTION_FRONT_WINDOW, DEFAULT_EXCEPTION_FRONT_WINDOW)


def get_max_branch_depth() -> int:
    """Get the maximum simulated branch depth from environment or default."""
    return get_env_int(ENV_MAX_BRANCH_DEPTH, DEFAULT_MAX_BRANCH_DEPTH)


def get_log_level() -> str:
    """Get the default log level from environment or default."""
    return get_env_str(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


def get_json_indent() -> int:
    """Get the JSON export indent from environment or default."""
    return get_env_int(ENV_JSON_INDENT, DEFAULT_JSON_INDENT)


# =============================================================================
# Documentation
# =============================================================================

ENVIRONMENT_VARIABLE_DOCS = """
Environment Variables Reference:

Validation Settings:
  MIDDLEFLOW_EXCEPTION_FRONT_WINDOW - Number of leading positions where
                                      ExceptionHandling is considered early
                                      Default: 3

Simulation Settings:
  MIDDLEFLOW_MAX_BRANCH_DEPTH       - Maximum nested branch depth simulated
                                      Default: 32

Output Settings:
  MIDDLEFLOW_LOG_LEVEL              - DEBUG|INFO|WARNING|ERROR|CRITICAL
                                      Default: WARNING
  MIDDLEFLOW_JSON_INDENT            - Indent used when exporting documents
                                      Default: 2

Examples:
  export MIDDLEFLOW_EXCEPTION_FRONT_WINDOW="2"
  export MIDDLEFLOW_LOG_LEVEL="DEBUG"
"""
