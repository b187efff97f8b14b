"""Users domain exceptions.

These exceptions represent business rule violations in the users domain.
They are raised by UsersService and caught by controllers.
"""

from __future__ import annotations

import datetime as dt

from utilities.errors import DomainError


class UsersError(DomainError):
    """Base for users domain errors."""


class UserNotFoundError(UsersError):
    """User does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found", user_id=user_id)


class NothingToUpdateError(UsersError):
    def __init__(self) -> None:
        super().__init__("No update data provided")


class InvalidUsernameError(UsersError):
    """Username fails the format rules."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="username")


class UsernameTakenError(UsersError):
    """Another account already uses the username."""

    def __init__(self, username: str) -> None:
        super().__init__("This username is already taken.", username=username)


class UsernameCooldownError(UsersError):
    """The username was changed too recently."""

    def __init__(self, available_at: dt.datetime, cooldown_days: int) -> None:
        super().__init__(
            f"Username can only be changed once every {cooldown_days} days. "
            f"Try again after {available_at.date().isoformat()}.",
            available_at=available_at,
        )
        self.available_at = available_at
