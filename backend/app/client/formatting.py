import time
import uuid
from datetime import datetime, tzinfo


def format_relative_time(timestamp_ms: int, now_ms: int | None = None) -> str:
    """Format a timestamp relative to now (e.g. "5 minutes ago")."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    seconds = (now_ms - timestamp_ms) // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    if days < 30:
        return f"{days} day{'s' if days != 1 else ''} ago"
    if days // 30 < 12:
        months = days // 30
        return f"{months} month{'s' if months != 1 else ''} ago"
    years = max(1, days // 365)
    return f"{years} year{'s' if years != 1 else ''} ago"


def format_time(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    """HH:MM, in local time unless ``tz`` is given."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz).strftime("%H:%M")


def format_date_time(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    """YYYY-MM-DD HH:MM, in local time unless ``tz`` is given."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz).strftime("%Y-%m-%d %H:%M")


def format_bytes(size: int) -> str:
    if size == 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def generate_id() -> str:
    return str(uuid.uuid4())
