"""Base service class."""

from __future__ import annotations

from logging import getLogger

from asyncpg import Pool
from litestar.datastructures import State

log = getLogger(__name__)


class BaseService:
    """Base class for all services.

    Services contain business logic and orchestrate repository calls.
    Repositories are injected; the pool and state are kept for services
    that need a transaction or an application-level collaborator.
    """

    def __init__(self, pool: Pool | None = None, state: State | None = None) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool, None when running without a database.
            state: Application state, a fresh one when omitted.
        """
        self._pool = pool
        self._state = state if state is not None else State()
