"""
Response bodies for repository-count lookups.
"""

from html import escape


def render_repo_count(username: str, count: int) -> str:
    """HTML fragment for a found count."""
    return f"<h2>{escape(username)} has {count} public repositories on GitHub</h2>"


def render_not_found(username: str) -> str:
    """HTML fragment for an unknown user."""
    return f"<h2>User {escape(username)} not found</h2>"
