"""Dashboard models."""

from msgspec import Struct

__all__ = ("DashboardStats",)


class DashboardStats(Struct, rename="camel"):
    """Per-user content statistics shown on the dashboard.

    Attributes:
        total_blogs: Number of blogs the user authored.
        total_tools: Number of tools the user submitted.
        total_blog_likes: Sum of likes across the user's blogs.
        total_blog_comments: Sum of comment counts across the user's blogs.
        total_blog_views: Sum of views across the user's blogs.
        total_tool_views: Sum of views across the user's tools.
    """

    total_blogs: int = 0
    total_tools: int = 0
    total_blog_likes: int = 0
    total_blog_comments: int = 0
    total_blog_views: int = 0
    total_tool_views: int = 0
