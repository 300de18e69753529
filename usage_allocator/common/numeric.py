import math


def to_non_negative_number(value) -> float:
    """
    Coerce a loosely typed quantity (number, numeric string, None) to a float >= 0.
    Anything that is not a finite number becomes 0.
    """
    if value is None:
        return 0.0

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0

    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0

    if not math.isfinite(parsed):
        return 0.0
    return max(0.0, parsed)
