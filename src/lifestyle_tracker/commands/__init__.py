"""CLI commands for lifestyle-tracker."""

from .favorites import favorites
from .init import init
from .serve import serve
from .session import session
from .types import types
from .week import week

__all__ = [
    "favorites",
    "init",
    "serve",
    "session",
    "types",
    "week",
]
