"""Authentication routes for email-verified accounts."""

from __future__ import annotations

import logging
from typing import Annotated, Any, NoReturn

import msgspec
from aiarcade_sdk.auth import (
    LoginRequest,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    PublicUser,
    RegisterRequest,
    ResendVerificationRequest,
    VerifyEmailRequest,
)
from litestar import Router, get, post, put
from litestar.connection import Request
from litestar.params import Body
from litestar.response import Response
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from services.auth_service import RECOVERY_MESSAGE, AuthService
from services.email_dispatcher import EmailDispatcher
from services.exceptions.email import EmailDeliveryError
from services.results import AuthFailure, VerificationRequired
from utilities.errors import CustomHTTPException

log = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
DASHBOARD_PATH = "/dashboard"
EMAIL_FAILED_MESSAGE = "Failed to send verification email"

FAILURE_STATUS = {
    "validation": HTTP_400_BAD_REQUEST,
    "already_exists": HTTP_409_CONFLICT,
    "invalid_credentials": HTTP_401_UNAUTHORIZED,
    "code_expired": HTTP_400_BAD_REQUEST,
    "code_mismatch": HTTP_400_BAD_REQUEST,
    "not_found": HTTP_400_BAD_REQUEST,
    "already_verified": HTTP_400_BAD_REQUEST,
}


def _raise_failure(failure: AuthFailure, status_code: int | None = None) -> NoReturn:
    """Raise the HTTP error matching an AuthFailure."""
    extra = {"errors": failure.errors} if failure.errors else None
    raise CustomHTTPException(
        detail=failure.message,
        status_code=status_code or FAILURE_STATUS[failure.reason],
        extra=extra,
    )


def _user_payload(user: PublicUser) -> dict[str, Any]:
    return msgspec.to_builtins(user)


async def _resend(auth_service: AuthService, email_dispatcher: EmailDispatcher, email: str | None) -> Response:
    if not email:
        raise CustomHTTPException(detail="Email is required", status_code=HTTP_400_BAD_REQUEST)

    result = await auth_service.resend_verification_code(email)
    if isinstance(result, AuthFailure):
        _raise_failure(result, HTTP_400_BAD_REQUEST)

    try:
        await email_dispatcher.send_verification_code(result.email, result.user_name, result.code)
    except EmailDeliveryError as e:
        raise CustomHTTPException(detail=EMAIL_FAILED_MESSAGE, status_code=HTTP_500_INTERNAL_SERVER_ERROR) from e

    return Response(
        {
            "success": True,
            "message": "Verification code sent! Please check your email.",
            "requiresVerification": True,
        },
        status_code=HTTP_200_OK,
    )


@post("/register", status_code=HTTP_200_OK)
async def register_endpoint(
    data: Annotated[RegisterRequest, Body(title="Registration data")],
    auth_service: AuthService,
    email_dispatcher: EmailDispatcher,
) -> Response:
    """Register a new account, or re-send the code when ``resendOnly`` is set.

    The account is created before the email goes out. If delivery fails the
    registration still stands and the code is returned for manual entry.

    Args:
        data: Registration payload.
        auth_service: Authentication service.
        email_dispatcher: Email dispatcher.

    Returns:
        Response with requiresVerification and emailSent flags.

    Raises:
        CustomHTTPException: On missing fields, validation or duplicate errors.
    """
    if data.resend_only:
        return await _resend(auth_service, email_dispatcher, data.email)

    if not data.email or not data.password or not data.username:
        raise CustomHTTPException(detail="Missing required fields", status_code=HTTP_400_BAD_REQUEST)

    result = await auth_service.register(data)
    if isinstance(result, AuthFailure):
        _raise_failure(result)

    content: dict[str, Any] = {
        "success": True,
        "message": "Registration successful! Please check your email for the verification code.",
        "requiresVerification": True,
        "emailSent": True,
        "user": {"userId": result.user_id, "email": result.email, "username": result.user_name},
    }
    try:
        await email_dispatcher.send_verification_code(result.email, result.user_name, result.code)
    except EmailDeliveryError:
        log.warning("Verification email failed for new account %s, returning code for manual entry", result.user_id)
        content.update(
            message="Registration successful, but the verification email failed to send. Use the code shown to verify.",
            emailSent=False,
            showCode=True,
            verificationCode=result.code,
        )
    return Response(content, status_code=HTTP_200_OK)


@post("/login", status_code=HTTP_200_OK)
async def login_endpoint(
    data: Annotated[LoginRequest, Body(title="Login credentials")],
    request: Request,
    auth_service: AuthService,
    email_dispatcher: EmailDispatcher,
) -> Response:
    """Login with email and password.

    Unverified accounts are not logged in; a fresh code is emailed and the
    response asks the client to verify.

    Args:
        data: Login payload with email and password.
        request: Current request, carries the session.
        auth_service: Authentication service.
        email_dispatcher: Email dispatcher.

    Returns:
        Response with the public profile, or the requiresVerification flag.

    Raises:
        CustomHTTPException: On missing fields or invalid credentials, including while locked.
    """
    if not data.email or not data.password:
        raise CustomHTTPException(detail="Email and password are required", status_code=HTTP_400_BAD_REQUEST)

    result = await auth_service.login(data.email, data.password)

    if isinstance(result, VerificationRequired):
        content: dict[str, Any] = {
            "success": False,
            "message": "Please verify your email. A new verification code has been sent.",
            "requiresVerification": True,
            "email": result.email,
        }
        try:
            await email_dispatcher.send_verification_code(result.email, result.user_name, result.code)
        except EmailDeliveryError:
            content.update(
                message="Email not verified and failed to send verification code. Please try again.",
                showCode=True,
                verificationCode=result.code,
            )
        return Response(content, status_code=HTTP_200_OK)

    if isinstance(result, AuthFailure):
        _raise_failure(result)

    request.set_session({SESSION_USER_KEY: result.user.user_id})
    return Response(
        {"success": True, "message": "Login successful", "user": _user_payload(result.user)},
        status_code=HTTP_200_OK,
    )


@post("/verify-email", status_code=HTTP_200_OK)
async def verify_email_endpoint(
    data: Annotated[VerifyEmailRequest, Body(title="Verification code")],
    request: Request,
    auth_service: AuthService,
) -> Response:
    """Verify email address with the emailed code and start a session.

    Args:
        data: Verification payload with email and code.
        request: Current request, carries the session.
        auth_service: Authentication service.

    Returns:
        Response with the verified profile and the redirect target.

    Raises:
        CustomHTTPException: On missing fields, unknown account or bad code.
    """
    if not data.email or not data.code:
        raise CustomHTTPException(
            detail="Email and verification code are required", status_code=HTTP_400_BAD_REQUEST
        )

    result = await auth_service.verify_email_with_code(data.email, data.code)
    if isinstance(result, AuthFailure):
        _raise_failure(result, HTTP_400_BAD_REQUEST)

    request.set_session({SESSION_USER_KEY: result.user.user_id})
    return Response(
        {
            "success": True,
            "message": "Email verification successful",
            "user": _user_payload(result.user),
            "redirectTo": DASHBOARD_PATH,
        },
        status_code=HTTP_200_OK,
    )


@put("/verify-email", status_code=HTTP_200_OK)
async def resend_verification_endpoint(
    data: Annotated[ResendVerificationRequest, Body(title="Resend request")],
    auth_service: AuthService,
    email_dispatcher: EmailDispatcher,
) -> Response:
    """Issue and email a new verification code."""
    return await _resend(auth_service, email_dispatcher, data.email)


@post("/reset-password", status_code=HTTP_200_OK)
async def request_password_reset_endpoint(
    data: Annotated[PasswordResetRequest, Body(title="Password reset request")],
    auth_service: AuthService,
    email_dispatcher: EmailDispatcher,
) -> Response:
    """Request a password reset code.

    Always returns the same message whether or not the email is registered.

    Args:
        data: Payload with the account email.
        auth_service: Authentication service.
        email_dispatcher: Email dispatcher.

    Returns:
        Response with the generic message.
    """
    result = await auth_service.send_password_recovery(data.email or "")
    if result.code and result.user_name:
        try:
            await email_dispatcher.send_password_reset_code(result.email, result.user_name, result.code)
        except EmailDeliveryError:
            log.warning("Password reset email could not be delivered")
    return Response({"message": RECOVERY_MESSAGE}, status_code=HTTP_200_OK)


@put("/reset-password", status_code=HTTP_200_OK)
async def reset_password_endpoint(
    data: Annotated[PasswordResetConfirmRequest, Body(title="Password reset confirmation")],
    auth_service: AuthService,
) -> Response:
    """Set a new password using the reset code.

    The account may be named by ``email`` or ``userId`` and the code sent
    as ``code`` or ``secret``.

    Args:
        data: Reset payload.
        auth_service: Authentication service.

    Returns:
        Response with a message; 400 with ``errors`` on failure.
    """
    code = data.code or data.secret
    email = data.email
    if not email and data.user_id:
        email = await auth_service.email_for_user_id(data.user_id)

    if not (email or data.user_id) or not code or not data.new_password:
        return Response({"message": "Missing required fields"}, status_code=HTTP_400_BAD_REQUEST)

    result = await auth_service.reset_password(email or "", code, data.new_password)
    if isinstance(result, AuthFailure):
        content: dict[str, Any] = {"message": result.message}
        if result.errors:
            content["errors"] = result.errors
        return Response(content, status_code=HTTP_400_BAD_REQUEST)

    return Response({"message": "Password has been reset successfully."}, status_code=HTTP_200_OK)


@get("/me")
async def me_endpoint(request: Request, auth_service: AuthService) -> Response:
    """Return the authoritative profile for the session cookie.

    Args:
        request: Current request, carries the session.
        auth_service: Authentication service.

    Returns:
        Response with ``authenticated`` and, when logged in, ``user``.
    """
    user_id = request.session.get(SESSION_USER_KEY) if request.session else None
    if not user_id:
        return Response(
            {"success": True, "authenticated": False, "message": "No active session"},
            status_code=HTTP_200_OK,
        )

    user = await auth_service.get_public_user(user_id)
    if user is None:
        request.clear_session()
        return Response(
            {"success": True, "authenticated": False, "message": "No active session"},
            status_code=HTTP_200_OK,
        )
    return Response({"success": True, "authenticated": True, "user": _user_payload(user)}, status_code=HTTP_200_OK)


@post("/logout", status_code=HTTP_200_OK)
async def logout_endpoint(request: Request) -> Response:
    """Clear the session cookie."""
    request.clear_session()
    return Response({"success": True, "message": "Logged out"}, status_code=HTTP_200_OK)


router = Router(
    path="/api/auth",
    route_handlers=[
        register_endpoint,
        login_endpoint,
        verify_email_endpoint,
        resend_verification_endpoint,
        request_password_reset_endpoint,
        reset_password_endpoint,
        me_endpoint,
        logout_endpoint,
    ],
)
