"""Jinja2 templates shared by the page routes."""

from datetime import datetime, timezone
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)


def _timeago(value: str | None) -> str:
    """Relative time for a provider ISO timestamp such as 2024-05-01T10:00:00Z."""
    if not value:
        return ""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    seconds = (datetime.now(timezone.utc) - dt).total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 604800:
        return f"{int(seconds // 86400)}d ago"
    return dt.strftime("%Y-%m-%d")


templates.env.filters["timeago"] = _timeago


def page_context(request: Request, title: str, **extra) -> dict:
    """Defaults every page template can rely on, plus the mobile flag set by middleware."""
    context = {
        "title": title,
        "is_mobile": getattr(request.state, "is_mobile", False),
        "cloudinary_url": None,
        "uploaded_file": None,
        "error": None,
    }
    context.update(extra)
    return context
