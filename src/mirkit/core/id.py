"""ID Generation.

ULID-based identifiers for load attempts and generation requests.
Prefixes keep log lines readable (``att_*``, ``gen_*``); ULIDs keep them
roughly time-ordered.
"""

from typing import NewType
from ulid import ULID

AttemptID = NewType("AttemptID", str)
"""External library load attempt identifier"""

GenerationID = NewType("GenerationID", str)
"""Code generation request identifier"""


class Prefix:
    """ID prefix constants."""

    ATTEMPT = "att"
    GENERATION = "gen"


def _generate_with_prefix(prefix: str) -> str:
    return f"{prefix}_{ULID()}"


def new_attempt_id() -> AttemptID:
    """Generate new load attempt ID."""
    return AttemptID(_generate_with_prefix(Prefix.ATTEMPT))


def new_generation_id() -> GenerationID:
    """Generate new generation ID."""
    return GenerationID(_generate_with_prefix(Prefix.GENERATION))

