"""
Runtime Configuration

Environment-aware limits for the hashing and parsing core. A ``.env`` file
is loaded at import time; explicit keyword arguments passed to the public
helpers always take precedence over the environment.

Environment Variables:
    - safe_digest_max_struct_depth: Maximum nesting of struct/array data
      during validation and hashing (default 32).
    - safe_digest_max_signature_depth: Maximum nesting of contract-signature
      payloads during recursive signature validation (default 4).
"""

import os
from typing import Optional

import dotenv

from .exceptions import ConfigurationError

dotenv.load_dotenv()

DEFAULT_MAX_STRUCT_DEPTH = 32
DEFAULT_MAX_SIGNATURE_DEPTH = 4

MAX_STRUCT_DEPTH_ENV = "safe_digest_max_struct_depth"
MAX_SIGNATURE_DEPTH_ENV = "safe_digest_max_signature_depth"


def _read_positive_int(key_name: str, default: int) -> int:
    raw = os.getenv(key_name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{key_name} must be an integer, got {raw!r}")
    if value < 1:
        raise ConfigurationError(f"{key_name} must be a positive integer, got {value}")
    return value


def get_max_struct_depth_from_env() -> int:
    """
    Load the maximum struct/array nesting depth from the environment.

    Returns:
        int: Configured depth, or ``DEFAULT_MAX_STRUCT_DEPTH`` when unset.

    Raises:
        ConfigurationError: If the variable is set to a non-positive or
            non-integer value.
    """
    return _read_positive_int(MAX_STRUCT_DEPTH_ENV, DEFAULT_MAX_STRUCT_DEPTH)


def get_max_signature_depth_from_env() -> int:
    """
    Load the maximum contract-signature nesting depth from the environment.

    Returns:
        int: Configured depth, or ``DEFAULT_MAX_SIGNATURE_DEPTH`` when unset.

    Raises:
        ConfigurationError: If the variable is set to a non-positive or
            non-integer value.
    """
    return _read_positive_int(MAX_SIGNATURE_DEPTH_ENV, DEFAULT_MAX_SIGNATURE_DEPTH)


def resolve_max_struct_depth(max_depth: Optional[int] = None) -> int:
    """Explicit ``max_depth`` wins; otherwise fall back to the environment."""
    if max_depth is None:
        return get_max_struct_depth_from_env()
    if max_depth < 1:
        raise ConfigurationError(f"max_depth must be a positive integer, got {max_depth}")
    return max_depth


def resolve_max_signature_depth(max_depth: Optional[int] = None) -> int:
    """Explicit ``max_depth`` wins; otherwise fall back to the environment."""
    if max_depth is None:
        return get_max_signature_depth_from_env()
    if max_depth < 1:
        raise ConfigurationError(f"max_depth must be a positive integer, got {max_depth}")
    return max_depth
