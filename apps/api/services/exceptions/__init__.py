"""Service-layer domain exceptions."""

from .comments import (
    BlogNotFoundError,
    CommentsError,
    EmptyCommentError,
    ParentCommentNotFoundError,
)
from .email import EmailDeliveryError
from .users import (
    InvalidUsernameError,
    NothingToUpdateError,
    UserNotFoundError,
    UsernameCooldownError,
    UsernameTakenError,
    UsersError,
)

__all__ = [
    "BlogNotFoundError",
    "CommentsError",
    "EmailDeliveryError",
    "EmptyCommentError",
    "InvalidUsernameError",
    "NothingToUpdateError",
    "ParentCommentNotFoundError",
    "UserNotFoundError",
    "UsernameCooldownError",
    "UsernameTakenError",
    "UsersError",
]
