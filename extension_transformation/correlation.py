"""
Correlation tokens linking a trigger to its later callback.

Tokens are `T` followed by eight decimal digits. Nothing is stored: the
transformation service echoes the token back on the callback route and the
relay does not check it against issued tokens. With TOKEN_SPACE possible
values, collisions between outstanding requests are possible;
collision_probability() gives the odds for a given load.
"""

from __future__ import annotations

import math
import secrets

TOKEN_PREFIX = "T"
TOKEN_DIGITS = 8
TOKEN_SPACE = 10**TOKEN_DIGITS


def generate_token() -> str:
    """Return a new random correlation token, e.g. `T04512877`."""
    return f"{TOKEN_PREFIX}{secrets.randbelow(TOKEN_SPACE):0{TOKEN_DIGITS}d}"


def collision_probability(outstanding: int, space: int = TOKEN_SPACE) -> float:
    """
    Probability that at least two of `outstanding` tokens are equal.

    Exact birthday-problem value, computed in log space.

    Args:
        outstanding: Number of tokens alive at the same time
        space: Number of distinct token values

    Returns:
        Collision probability in [0, 1]
    """
    if outstanding < 0:
        raise ValueError("outstanding must be non-negative")
    if outstanding <= 1:
        return 0.0
    if outstanding > space:
        return 1.0

    # log P(no collision) = sum(log(1 - i/space)) for i < outstanding
    log_unique = sum(math.log1p(-i / space) for i in range(1, outstanding))
    return -math.expm1(log_unique)
