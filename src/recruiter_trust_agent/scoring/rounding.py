"""Score rounding shared by the rule engine and score fusion."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, so 70.5 becomes 71."""

    return int(math.floor(value + 0.5))
