"""Parser limits and their environment overrides

The only tunable is the maximum nesting depth the parser accepts. Lists,
arrays, ranges, typed values and nested structure/caps payloads each count as
one level. The limit keeps adversarial input from exhausting the interpreter
stack.
"""

import os
from typing import Optional


# Default maximum nesting depth
DEFAULT_MAX_DEPTH = 128

# Width of a bitmask value (GstBitmask is a guint64)
BITMASK_BITS = 64
BITMASK_MAX = (1 << BITMASK_BITS) - 1

# Environment variable overriding DEFAULT_MAX_DEPTH
MAX_DEPTH_ENV = "GSTSTRUCTURE_MAX_DEPTH"


def get_max_depth() -> int:
    """Get the maximum nesting depth from the environment or default

    Checks `GSTSTRUCTURE_MAX_DEPTH`; a missing, non-integer or non-positive
    value falls back to DEFAULT_MAX_DEPTH.
    """
    raw = os.getenv(MAX_DEPTH_ENV)
    if not raw:
        return DEFAULT_MAX_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        return DEFAULT_MAX_DEPTH
    if depth <= 0:
        return DEFAULT_MAX_DEPTH
    return depth


def resolve_max_depth(max_depth: Optional[int] = None) -> int:
    """Use an explicit limit when given, otherwise the configured one"""
    if max_depth is None:
        return get_max_depth()
    if max_depth <= 0:
        raise ValueError(f"max_depth must be positive, got {max_depth}")
    return max_depth
