from typing import Optional


def to_minutes(seconds: Optional[float]) -> float:
    """Convert a duration in seconds to minutes; None counts as zero."""
    if not seconds:
        return 0.0
    return float(seconds) / 60.0


def format_duration(minutes: float) -> str:
    """Format minutes as "2h 15m" or "45m"."""
    try:
        total = int(round(float(minutes)))
    except (ValueError, TypeError):
        return "0m"
    if total < 0:
        total = 0
    hours, mins = divmod(total, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"
