# src/aiarcade_sdk/__init__.py
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from . import (
    auth,
    client,
    comments,
    dashboard,
    session,
    users,
)

__all__ = [
    "auth",
    "client",
    "comments",
    "dashboard",
    "session",
    "users",
]

try:
    __version__ = _pkg_version("aiarcade")
except PackageNotFoundError:
    __version__ = "0.0.0"
