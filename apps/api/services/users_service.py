"""Service layer for users domain business logic."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone

from aiarcade_sdk.users import UserNames, UserUpdateRequest, UserUpdateResponse
from litestar.datastructures import State

from repository.exceptions import UniqueConstraintViolationError
from repository.users_repository import UsersRepository
from services.auth_service import AuthService
from services.base import BaseService
from services.exceptions.users import (
    InvalidUsernameError,
    NothingToUpdateError,
    UserNotFoundError,
    UsernameCooldownError,
    UsernameTakenError,
)

log = logging.getLogger(__name__)

USERNAME_CHANGE_COOLDOWN_DAYS = int(os.getenv("USERNAME_CHANGE_COOLDOWN_DAYS", "30"))


class UsersService(BaseService):
    """Service for users domain business logic."""

    def __init__(
        self,
        users_repo: UsersRepository,
        *,
        cooldown: timedelta = timedelta(days=USERNAME_CHANGE_COOLDOWN_DAYS),
    ) -> None:
        """Initialize service.

        Args:
            users_repo: Users repository instance.
            cooldown: Minimum time between two username changes.
        """
        super().__init__()
        self._users_repo = users_repo
        self._cooldown = cooldown

    async def update_user_names(self, data: UserUpdateRequest) -> UserUpdateResponse:
        """Update display name and/or username.

        Args:
            data: Update payload.

        Returns:
            The names before and after the update.

        Raises:
            NothingToUpdateError: Neither field was provided.
            UserNotFoundError: Unknown user.
            InvalidUsernameError: Username fails the format rules.
            UsernameTakenError: Another account holds the username.
            UsernameCooldownError: Username changed within the cooldown.
        """
        new_name = (data.new_name or "").strip() or None
        new_username = (data.new_username or "").strip() or None
        if new_name is None and new_username is None:
            raise NothingToUpdateError

        current = await self._users_repo.fetch_profile_names(data.user_id)
        if not current:
            raise UserNotFoundError(data.user_id)

        update_username = new_username is not None and new_username != current["username"]
        if update_username:
            if errors := AuthService.validate_username(new_username):
                raise InvalidUsernameError(errors[0])
            last_changed = current.get("username_last_updated_at")
            if last_changed is not None:
                available_at = last_changed + self._cooldown
                if datetime.now(timezone.utc) < available_at:
                    raise UsernameCooldownError(available_at, self._cooldown.days)
            if await self._users_repo.check_username_taken(new_username, data.user_id):
                raise UsernameTakenError(new_username)

        try:
            updated = await self._users_repo.update_user_names(
                data.user_id,
                name=new_name,
                username=new_username,
                update_name=new_name is not None,
                update_username=update_username,
            )
        except UniqueConstraintViolationError as e:
            raise UsernameTakenError(new_username or "") from e
        if not updated:
            raise UserNotFoundError(data.user_id)

        log.info("Updated names for user %s", data.user_id)
        return UserUpdateResponse(
            success=True,
            message="User updated successfully",
            old_data=UserNames(name=current["name"], username=current["username"]),
            new_data=UserNames(name=updated["name"], username=updated["username"]),
        )


async def provide_users_service(users_repo: UsersRepository) -> UsersService:
    """Litestar DI provider for service.

    Args:
        users_repo: Users repository instance.

    Returns:
        New service instance.
    """
    return UsersService(users_repo)
