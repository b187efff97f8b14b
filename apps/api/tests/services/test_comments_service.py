"""Unit tests for the comment tree and CommentsService."""

from datetime import datetime, timedelta, timezone

import pytest
from aiarcade_sdk.comments import CommentCreateRequest

from repository.exceptions import ForeignKeyViolationError
from services.comments_service import CommentsService, build_comment_tree, count_visible
from services.exceptions.comments import BlogNotFoundError, EmptyCommentError, ParentCommentNotFoundError

pytestmark = [
    pytest.mark.domain_comments,
]

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _row(comment_id, parent=None, minutes=0, blog_id="b1"):
    return {
        "id": comment_id,
        "blog_id": blog_id,
        "author_id": "u1",
        "author_name": "Alice",
        "content": f"comment {comment_id}",
        "parent_comment_id": parent,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }


class TestBuildCommentTree:
    def test_empty(self):
        assert build_comment_tree([]) == []

    def test_nests_replies_at_any_depth(self):
        rows = [_row("a"), _row("b", "a", 1), _row("c", "b", 2), _row("d", None, 3)]

        tree = build_comment_tree(rows)

        assert [node.id for node in tree] == ["a", "d"]
        assert [node.id for node in tree[0].replies] == ["b"]
        assert [node.id for node in tree[0].replies[0].replies] == ["c"]
        assert tree[1].replies == []

    def test_keeps_created_order_among_siblings(self):
        rows = [_row("a"), _row("r1", "a", 1), _row("r2", "a", 2), _row("r3", "a", 3)]

        tree = build_comment_tree(rows)

        assert [node.id for node in tree[0].replies] == ["r1", "r2", "r3"]

    def test_reply_listed_before_parent_still_attaches(self):
        rows = [_row("child", "parent", 5), _row("parent", None, 0)]

        tree = build_comment_tree(rows)

        assert [node.id for node in tree] == ["parent"]
        assert tree[0].replies[0].id == "child"

    def test_orphans_are_hidden(self):
        rows = [_row("a"), _row("orphan", "missing", 1), _row("orphan-child", "orphan", 2)]

        tree = build_comment_tree(rows)

        assert [node.id for node in tree] == ["a"]
        assert count_visible(tree) == 1


class TestCommentsService:
    async def test_get_thread(self, mock_comments_repo):
        mock_comments_repo.fetch_blog_comments.return_value = [_row("a"), _row("b", "a", 1), _row("x", "gone", 2)]

        thread = await CommentsService(mock_comments_repo).get_thread("b1")

        assert thread.blog_id == "b1"
        assert thread.total == 2
        assert thread.comments[0].replies[0].id == "b"

    async def test_add_top_level_comment(self, mock_comments_repo):
        mock_comments_repo.check_blog_exists.return_value = True
        mock_comments_repo.insert_comment.return_value = _row("new")

        node = await CommentsService(mock_comments_repo).add_comment(
            "b1", CommentCreateRequest(author_id="u1", content="  hello  ")
        )

        assert node.id == "new"
        kwargs = mock_comments_repo.insert_comment.call_args.kwargs
        assert kwargs["content"] == "hello"
        assert kwargs["parent_comment_id"] is None
        mock_comments_repo.fetch_comment.assert_not_called()

    async def test_add_reply(self, mock_comments_repo):
        mock_comments_repo.check_blog_exists.return_value = True
        mock_comments_repo.fetch_comment.return_value = _row("a")
        mock_comments_repo.insert_comment.return_value = _row("r", "a", 1)

        node = await CommentsService(mock_comments_repo).add_comment(
            "b1", CommentCreateRequest(author_id="u1", content="reply", parent_comment_id="a")
        )

        assert node.parent_comment_id == "a"

    async def test_empty_content(self, mock_comments_repo):
        with pytest.raises(EmptyCommentError):
            await CommentsService(mock_comments_repo).add_comment("b1", CommentCreateRequest(author_id="u1", content=" "))

    async def test_unknown_blog(self, mock_comments_repo):
        mock_comments_repo.check_blog_exists.return_value = False

        with pytest.raises(BlogNotFoundError):
            await CommentsService(mock_comments_repo).add_comment("b1", CommentCreateRequest(author_id="u1", content="x"))

    async def test_parent_on_other_blog(self, mock_comments_repo):
        mock_comments_repo.check_blog_exists.return_value = True
        mock_comments_repo.fetch_comment.return_value = _row("a", blog_id="b2")

        with pytest.raises(ParentCommentNotFoundError):
            await CommentsService(mock_comments_repo).add_comment(
                "b1", CommentCreateRequest(author_id="u1", content="x", parent_comment_id="a")
            )

    async def test_parent_deleted_during_insert(self, mock_comments_repo):
        mock_comments_repo.check_blog_exists.return_value = True
        mock_comments_repo.fetch_comment.return_value = _row("a")
        mock_comments_repo.insert_comment.side_effect = ForeignKeyViolationError(
            "comments_parent_comment_id_fkey", "content.comments"
        )

        with pytest.raises(ParentCommentNotFoundError):
            await CommentsService(mock_comments_repo).add_comment(
                "b1", CommentCreateRequest(author_id="u1", content="x", parent_comment_id="a")
            )
