"""Blog comment routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from aiarcade_sdk.comments import CommentCreateRequest, CommentNode, CommentThreadResponse
from litestar.params import Body
from litestar.status_codes import HTTP_201_CREATED, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from services.comments_service import CommentsService
from services.exceptions.comments import BlogNotFoundError, EmptyCommentError, ParentCommentNotFoundError
from utilities.errors import CustomHTTPException


class CommentsController(litestar.Controller):
    """Blog comments controller."""

    tags = ["Comments"]
    path = "/api/blogs/{blog_id:str}/comments"

    @litestar.get(
        path="/",
        summary="Get Comment Thread",
        description="All comments of a blog with replies nested under their parents.",
    )
    async def get_comments(self, blog_id: str, comments_service: CommentsService) -> CommentThreadResponse:
        """Get the comment tree of a blog.

        Args:
            blog_id: The blog ID.
            comments_service: Comments service.

        Returns:
            Top-level comments with nested replies.
        """
        return await comments_service.get_thread(blog_id)

    @litestar.post(
        path="/",
        status_code=HTTP_201_CREATED,
        summary="Add Comment",
        description="Post a comment, or a reply when parentCommentId is set.",
    )
    async def add_comment(
        self,
        blog_id: str,
        data: Annotated[CommentCreateRequest, Body(title="Comment")],
        comments_service: CommentsService,
    ) -> CommentNode:
        """Add a comment or reply.

        Args:
            blog_id: The blog ID.
            data: Comment payload.
            comments_service: Comments service.

        Returns:
            The stored comment.

        Raises:
            CustomHTTPException: On empty content, unknown blog or unknown parent.
        """
        try:
            return await comments_service.add_comment(blog_id, data)
        except (EmptyCommentError, ParentCommentNotFoundError) as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except BlogNotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
