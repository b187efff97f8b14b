"""API routes.

Each route module exposes either a module-level ``Router`` (``auth``) or one
or more ``Controller`` classes (``users``, ``dashboard``, ``comments``).
``route_handlers`` collects them in ``ROUTE_MODULES`` order for ``create_app``.
"""

import importlib
import inspect

from litestar import Controller, Router

ROUTE_MODULES = ("auth", "users", "dashboard", "comments")


def _handlers_in(module_name: str) -> list[Router | type[Controller]]:
    mod = importlib.import_module(f"{__name__}.{module_name}")
    found: list[Router | type[Controller]] = []
    for _, obj in inspect.getmembers(mod):
        if isinstance(obj, Router):
            found.append(obj)
        elif inspect.isclass(obj) and issubclass(obj, Controller) and obj.__module__ == mod.__name__:
            found.append(obj)
    return found


route_handlers = [handler for name in ROUTE_MODULES for handler in _handlers_in(name)]
