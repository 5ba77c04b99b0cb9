# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware package - ASGI pipeline stages for genro-authgate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send


class BaseMiddleware(ABC):
    """Base class for middleware wrapping an ASGI app.

    Class attributes:
        middleware_name: Identifier used in logs and config sections.
    """

    middleware_name: str = ""

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp, **kwargs: Any) -> None:
        """Initialize middleware with wrapped app.

        Args:
            app: The ASGI app to wrap (next in chain).
            **kwargs: Middleware-specific configuration.
        """
        self.app = app

    @abstractmethod
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None: ...


from .basic_auth import BasicAuthMiddleware  # noqa: E402

__all__ = ["BaseMiddleware", "BasicAuthMiddleware"]
