import math
from typing import Optional


def format_time(seconds: float) -> Optional[str]:
    try:
        seconds = int(round(seconds))
        if seconds < 0:
            seconds = 0
        if seconds < 60:
            return f"{seconds}s"
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        secs = seconds % 60
        if hours == 0:
            return f"{minutes}:{secs:02d}"
        return f"{hours}:{minutes:02d}:{secs:02d}"
    except (ValueError, TypeError, OverflowError):
        return None


def format_pace(pace_min_per_km: Optional[float]) -> Optional[str]:
    """Render min/km as "m:ss /km"; None for missing or infinite pace."""
    if pace_min_per_km is None or math.isinf(pace_min_per_km) or math.isnan(pace_min_per_km):
        return None
    total_seconds = int(round(pace_min_per_km * 60))
    if total_seconds < 0:
        return None
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes}:{secs:02d} /km"


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{int(round(meters))} m"
    return f"{meters / 1000.0:.2f} km"
