"""Litestar application factory for the AI Arcade API."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import asyncpg
import sentry_sdk
from litestar import Litestar
from litestar.datastructures import State
from litestar.di import Provide
from litestar.exceptions import HTTPException
from litestar.logging import LoggingConfig
from litestar.middleware.session.client_side import CookieBackendConfig
from litestar.openapi import OpenAPIConfig

from repository.auth_repository import provide_auth_repository
from repository.comments_repository import provide_comments_repository
from repository.dashboard_repository import provide_dashboard_repository
from repository.users_repository import provide_users_repository
from routes import route_handlers
from services.auth_service import provide_auth_service
from services.comments_service import provide_comments_service
from services.dashboard_service import provide_dashboard_service
from services.email_dispatcher import EmailDispatcher, provide_email_dispatcher
from services.users_service import provide_users_service
from utilities.errors import http_exception_handler, internal_error_handler

log = logging.getLogger(__name__)

PSQL_DSN = os.getenv("PSQL_DSN")
SESSION_SECRET = os.getenv("SESSION_SECRET")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SENTRY_DSN = os.getenv("SENTRY_DSN")

SESSION_MAX_AGE = 7 * 24 * 60 * 60


def _session_secret() -> bytes:
    if SESSION_SECRET:
        return bytes.fromhex(SESSION_SECRET)
    log.warning("SESSION_SECRET not configured, sessions will not survive a restart")
    return os.urandom(32)


async def _async_pg_init(conn: asyncpg.Connection) -> None:
    """Per-connection setup for the pool."""
    await conn.execute("SET TIME ZONE 'UTC';")


DEFAULT_DEPENDENCIES: dict[str, Provide] = {
    "auth_repo": Provide(provide_auth_repository),
    "auth_service": Provide(provide_auth_service),
    "email_dispatcher": Provide(provide_email_dispatcher),
    "users_repo": Provide(provide_users_repository),
    "users_service": Provide(provide_users_service),
    "dashboard_repo": Provide(provide_dashboard_repository),
    "dashboard_service": Provide(provide_dashboard_service),
    "comments_repo": Provide(provide_comments_repository),
    "comments_service": Provide(provide_comments_service),
}


def create_app(
    psql_dsn: str | None = None,
    *,
    dependencies: Mapping[str, Provide] | None = None,
    email_dispatcher: EmailDispatcher | None = None,
    debug: bool = False,
) -> Litestar:
    """Build the Litestar application.

    Args:
        psql_dsn: Postgres DSN, falls back to ``PSQL_DSN``. Without one no pool is created.
        dependencies: Providers replacing the defaults of the same name.
        email_dispatcher: Dispatcher to use instead of the configured one.
        debug: Litestar debug mode.

    Returns:
        Configured Litestar app.
    """
    dsn = psql_dsn or PSQL_DSN

    if SENTRY_DSN:
        sentry_sdk.init(dsn=SENTRY_DSN, traces_sample_rate=0.1, send_default_pii=False)

    @asynccontextmanager
    async def db_lifespan(app: Litestar) -> AsyncIterator[None]:
        if not dsn:
            log.warning("PSQL_DSN not configured, starting without a database pool")
            yield
            return

        pool = await asyncpg.create_pool(dsn=dsn, init=_async_pg_init)
        app.state.db_pool = pool
        log.info("Database pool created")
        try:
            yield
        finally:
            await pool.close()
            log.info("Database pool closed")

    session_config = CookieBackendConfig(
        secret=_session_secret(),
        key="aiarcade_session",
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
    )

    logging_config = LoggingConfig(
        root={"level": LOG_LEVEL, "handlers": ["queue_listener"]},
        formatters={"standard": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}},
        log_exceptions="debug",
    )

    return Litestar(
        route_handlers=route_handlers,
        dependencies={**DEFAULT_DEPENDENCIES, **(dependencies or {})},
        state=State({"db_pool": None, "email_dispatcher": email_dispatcher or EmailDispatcher()}),
        lifespan=[db_lifespan],
        middleware=[session_config.middleware],
        exception_handlers={
            HTTPException: http_exception_handler,
            Exception: internal_error_handler,
        },
        logging_config=logging_config,
        openapi_config=OpenAPIConfig(title="AI Arcade API", version="1.0.0"),
        debug=debug,
    )
