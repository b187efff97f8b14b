"""User profile models."""

from msgspec import Struct

__all__ = (
    "UserNames",
    "UserUpdateRequest",
    "UserUpdateResponse",
)


class UserUpdateRequest(Struct, rename="camel"):
    """Payload for changing a user's display name and/or username.

    Attributes:
        user_id: The user to update.
        new_name: New display name.
        new_username: New unique username, subject to the change cooldown.
    """

    user_id: str | None = None
    new_name: str | None = None
    new_username: str | None = None


class UserNames(Struct):
    """Name pair before or after an update."""

    name: str
    username: str


class UserUpdateResponse(Struct, rename="camel"):
    """Response for a profile update."""

    success: bool
    message: str
    old_data: UserNames
    new_data: UserNames
