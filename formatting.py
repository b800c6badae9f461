"""
Display formatting shared by the dashboard views.
"""

from datetime import datetime
from typing import Optional

from models import SyncStatus
from success import TIER_HIGH, TIER_LOW, TIER_MEDIUM


NEUTRAL_CHANGE = 0.1

STATUS_ICONS = {
    SyncStatus.COMPLETED: "✅",
    SyncStatus.FAILED: "❌",
    SyncStatus.SYNCING: "🔄",
    SyncStatus.PENDING: "🕒",
}

STATUS_COLORS = {
    SyncStatus.COMPLETED: "green",
    SyncStatus.FAILED: "red",
    SyncStatus.SYNCING: "blue",
    SyncStatus.PENDING: "gray",
}

TIER_COLORS = {
    TIER_HIGH: "green",
    TIER_MEDIUM: "blue",
    TIER_LOW: "orange",
}


def format_number(value: Optional[float], decimals: Optional[int] = None) -> str:
    """
    Group thousands like a browser's default number formatting.

    Without `decimals` up to three fraction digits are shown and trailing
    zeros dropped, so 1000 -> "1,000" and 1234.5 -> "1,234.5".
    """
    value = value or 0
    if decimals is not None:
        return f"{value:,.{decimals}f}"
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def format_currency(value: Optional[float], decimals: Optional[int] = None) -> str:
    value = value or 0
    if value < 0:
        return f"-${format_number(-value, decimals)}"
    return f"${format_number(value, decimals)}"


def format_rate(value: Optional[float]) -> str:
    return f"{(value or 0):.1f}%"


def format_change(change: Optional[float]) -> str:
    """Signed percentage change, e.g. "+12.3%". Empty when unknown."""
    if change is None:
        return ""
    sign = "+" if change > 0 else ""
    return f"{sign}{change:.1f}%"


def change_tone(change: Optional[float]) -> str:
    if change is None or abs(change) < NEUTRAL_CHANGE:
        return "neutral"
    return "positive" if change > 0 else "negative"


def format_timestamp(dt: Optional[datetime]) -> str:
    if dt is None:
        return "-"
    return dt.strftime("%d/%m/%Y %H:%M")


def initials(title: str) -> str:
    return (title or "")[:2].upper()


def truncate(text: str, length: int = 30) -> str:
    text = text or ""
    if len(text) <= length:
        return text
    return text[:length - 1] + "…"


def status_label(status: SyncStatus) -> str:
    return SyncStatus(status).value.lower()


def status_icon(status: SyncStatus) -> str:
    return STATUS_ICONS.get(SyncStatus(status), "")


def status_badge(status: SyncStatus) -> str:
    """Streamlit markdown badge, e.g. ":green[✅ completed]"."""
    status = SyncStatus(status)
    return f":{STATUS_COLORS[status]}[{status_icon(status)} {status_label(status)}]"


def tier_badge(level: str) -> str:
    color = TIER_COLORS.get(level)
    if color is None:
        return level
    return f":{color}[{level}]"
