"""Blog comments service."""

from __future__ import annotations

import logging
import uuid

from aiarcade_sdk.comments import CommentCreateRequest, CommentNode, CommentThreadResponse

from repository.comments_repository import CommentsRepository
from repository.exceptions import ForeignKeyViolationError
from services.base import BaseService
from services.exceptions.comments import BlogNotFoundError, EmptyCommentError, ParentCommentNotFoundError

log = logging.getLogger(__name__)


def node_from_row(row: dict) -> CommentNode:
    return CommentNode(
        id=row["id"],
        blog_id=row["blog_id"],
        author_id=row["author_id"],
        content=row["content"],
        created_at=row["created_at"],
        author_name=row.get("author_name"),
        parent_comment_id=row.get("parent_comment_id"),
        replies=[],
    )


def build_comment_tree(rows: list[dict]) -> list[CommentNode]:
    """Arrange a flat comment list into threads.

    First pass creates a node per comment, second pass attaches each reply to
    its parent. Input order is kept among siblings. Replies whose parent is
    not in ``rows`` are dropped along with their own replies.

    Args:
        rows: Comment rows, typically ordered by creation time.

    Returns:
        Top-level comments with nested ``replies``.
    """
    nodes: dict[str, CommentNode] = {}
    for row in rows:
        node = node_from_row(row)
        nodes[node.id] = node

    roots: list[CommentNode] = []
    for node in nodes.values():
        if node.parent_comment_id is None:
            roots.append(node)
            continue
        parent = nodes.get(node.parent_comment_id)
        if parent is None:
            log.debug("Skipping orphan comment %s", node.id)
            continue
        parent.replies.append(node)
    return roots


def count_visible(nodes: list[CommentNode]) -> int:
    """Count comments reachable from the given threads."""
    return sum(1 + count_visible(node.replies) for node in nodes)


class CommentsService(BaseService):
    """Service for blog comment threads."""

    def __init__(self, comments_repo: CommentsRepository) -> None:
        super().__init__()
        self._comments_repo = comments_repo

    async def get_thread(self, blog_id: str) -> CommentThreadResponse:
        """Fetch all comments of a blog as a tree.

        Args:
            blog_id: The blog ID.

        Returns:
            Comment threads and the number of visible comments.
        """
        rows = await self._comments_repo.fetch_blog_comments(blog_id)
        tree = build_comment_tree(rows)
        return CommentThreadResponse(blog_id=blog_id, total=count_visible(tree), comments=tree)

    async def add_comment(self, blog_id: str, data: CommentCreateRequest) -> CommentNode:
        """Post a comment or a reply.

        Args:
            blog_id: Blog being commented on.
            data: Comment payload.

        Returns:
            The stored comment.

        Raises:
            EmptyCommentError: Content is blank.
            BlogNotFoundError: Unknown blog.
            ParentCommentNotFoundError: Reply target unknown or on another blog.
        """
        content = data.content.strip()
        if not content:
            raise EmptyCommentError

        if not await self._comments_repo.check_blog_exists(blog_id):
            raise BlogNotFoundError(blog_id)

        if data.parent_comment_id is not None:
            parent = await self._comments_repo.fetch_comment(data.parent_comment_id)
            if not parent or parent["blog_id"] != blog_id:
                raise ParentCommentNotFoundError(data.parent_comment_id)

        try:
            row = await self._comments_repo.insert_comment(
                comment_id=uuid.uuid4().hex,
                blog_id=blog_id,
                author_id=data.author_id,
                author_name=data.author_name,
                content=content,
                parent_comment_id=data.parent_comment_id,
            )
        except ForeignKeyViolationError as e:
            if data.parent_comment_id is not None and "parent" in e.constraint_name:
                raise ParentCommentNotFoundError(data.parent_comment_id) from e
            raise BlogNotFoundError(blog_id) from e

        log.info("Added comment %s to blog %s", row["id"], blog_id)
        return node_from_row(row)


async def provide_comments_service(comments_repo: CommentsRepository) -> CommentsService:
    """Litestar DI provider for service."""
    return CommentsService(comments_repo)
