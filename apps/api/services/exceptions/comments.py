"""Comments domain exceptions."""

from __future__ import annotations

from utilities.errors import DomainError


class CommentsError(DomainError):
    """Base for comments domain errors."""


class BlogNotFoundError(CommentsError):
    def __init__(self, blog_id: str) -> None:
        super().__init__("Blog not found", blog_id=blog_id)


class ParentCommentNotFoundError(CommentsError):
    """Reply target is unknown or belongs to a different blog."""

    def __init__(self, parent_comment_id: str) -> None:
        super().__init__("Parent comment not found", parent_comment_id=parent_comment_id)


class EmptyCommentError(CommentsError):
    def __init__(self) -> None:
        super().__init__("Comment content is required", field="content")
