"""Small text helpers shared by the services that compose messages (HTML parse mode)."""

from aiogram import html


def truncate(text: str, limit: int = 100) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def quote(text: str) -> str:
    """Escape user-supplied text for HTML messages."""
    return html.quote(text)


def preview(text: str, limit: int = 100) -> str:
    return quote(truncate(text, limit))
