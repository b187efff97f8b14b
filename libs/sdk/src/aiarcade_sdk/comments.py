"""Blog comment models."""

import datetime as dt

from msgspec import Struct

__all__ = (
    "CommentCreateRequest",
    "CommentNode",
    "CommentThreadResponse",
)


class CommentCreateRequest(Struct, rename="camel"):
    """Payload for posting a comment or a reply.

    Attributes:
        author_id: The commenting user's ID.
        content: Comment body.
        author_name: Name shown next to the comment.
        parent_comment_id: ID of the comment being replied to, if any.
    """

    author_id: str
    content: str
    author_name: str | None = None
    parent_comment_id: str | None = None


class CommentNode(Struct, rename="camel"):
    """A comment together with its nested replies."""

    id: str
    blog_id: str
    author_id: str
    content: str
    created_at: dt.datetime
    author_name: str | None = None
    parent_comment_id: str | None = None
    replies: list["CommentNode"] = []


class CommentThreadResponse(Struct, rename="camel"):
    """All comments of a blog arranged as a forest of top-level threads."""

    blog_id: str
    total: int
    comments: list[CommentNode]
