"""User profile routes."""

from __future__ import annotations

import logging
from typing import Annotated

import litestar
from aiarcade_sdk.users import UserUpdateRequest, UserUpdateResponse
from litestar.params import Body
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_429_TOO_MANY_REQUESTS,
)

from services.exceptions.users import (
    InvalidUsernameError,
    NothingToUpdateError,
    UserNotFoundError,
    UsernameCooldownError,
    UsernameTakenError,
)
from services.users_service import UsersService
from utilities.errors import CustomHTTPException

log = logging.getLogger(__name__)


class UsersController(litestar.Controller):
    """User profile controller."""

    tags = ["Users"]
    path = "/api"

    @litestar.post(
        path="/update-user",
        status_code=HTTP_200_OK,
        summary="Update User Names",
        description="Change the display name and/or username. Username changes are limited by a cooldown.",
    )
    async def update_user(
        self,
        data: Annotated[UserUpdateRequest, Body(title="Profile update")],
        users_service: UsersService,
    ) -> UserUpdateResponse:
        """Update user names.

        Args:
            data: The payload for updating user names.
            users_service: Users service.

        Returns:
            Old and new names.

        Raises:
            CustomHTTPException: On unknown user, bad or taken username, or cooldown.
        """
        if not data.user_id:
            raise CustomHTTPException(detail="User ID is required", status_code=HTTP_400_BAD_REQUEST)
        try:
            return await users_service.update_user_names(data)
        except (NothingToUpdateError, InvalidUsernameError) as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except UserNotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except UsernameTakenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_409_CONFLICT) from e
        except UsernameCooldownError as e:
            raise CustomHTTPException(
                detail=e.message,
                status_code=HTTP_429_TOO_MANY_REQUESTS,
                extra={"availableAt": e.available_at.isoformat()},
            ) from e
