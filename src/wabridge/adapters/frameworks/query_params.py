"""Shared query parameter parsing utilities for framework adapters."""


def _parse_limit_param(raw: str | None, default: int, cap: int) -> int:
    """Parse and clamp the 'limit' query parameter.

    Args:
        raw: Raw query string value, or None when absent.
        default: Value used when the parameter is missing or invalid.
        cap: Upper bound applied to any value.

    Returns:
        Integer in the range 1..cap. Missing, non-numeric, NaN and
        non-positive values fall back to ``default``.
    """
    try:
        value = float(raw) if raw is not None else float("nan")
    except ValueError:
        value = float("nan")
    # NaN fails every comparison, so it lands on the default too
    if not value >= 1:
        return min(default, cap)
    if value == float("inf"):
        return cap
    return min(int(value), cap)
