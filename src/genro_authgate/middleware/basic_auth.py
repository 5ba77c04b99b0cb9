# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Basic authentication middleware.

Protects URL prefixes with realms. Each request under a protected prefix
goes through AuthGate; authenticated requests continue to the app with
scope["auth"] set, the others get the finalized 401 challenge and the app
is never called.

The gate runs through smartasync, which moves the synchronous decision to
a worker thread when called from the event loop. Directory binds and file
reads therefore block only the request they belong to.

Config:
    Each keyword entry is a realm definition::

        route (str): URL prefix to protect. Default: "/".
        realm (str): Display name for WWW-Authenticate. Default: entry name.
        username, password, path, encoding, host, port, basedn, binddn,
        bindpw, filter, scope, timeout: credential keys (see strategies.py).

    Callback realms are registered in code with protect().

scope["auth"] format:
    {"identity": "alice", "tags": [], "backend": "basic:file", "realm": "Staff"}

Prefix matching:
    The longest matching prefix wins. "/admin" protects "/admin" and
    "/admin/users" but not "/administrator".

Example::

    app = BasicAuthMiddleware(
        app,
        admin={"route": "/admin", "realm": "Admin Area",
               "username": "admin", "password": "$apr1$..."},
        staff={"route": "/staff", "host": "ldap.company.com",
               "basedn": "ou=People,dc=company,dc=com"},
    )
    app.protect("/api", Realm("API", CallbackRealm(check_token)))

    # or from a TOML file
    app = BasicAuthMiddleware.from_config(app, "authgate.toml")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from smartasync import smartasync

from . import BaseMiddleware
from ..config import ConfigError, find_config_file, load_realm_entries
from ..gate import AuthGate
from ..realm import CredentialMap, Realm
from ..request import HttpRequest
from ..strategies import resolve_strategy

if TYPE_CHECKING:
    from ..types import ASGIApp, AuthInfo, Receive, Scope, Send

__all__ = ["BasicAuthMiddleware"]

logger = logging.getLogger("genro_authgate.middleware")


def _normalize_route(route: str) -> str:
    return "/" + route.strip().strip("/")


class BasicAuthMiddleware(BaseMiddleware):
    """Basic authentication middleware with per-prefix realms.

    Attributes:
        gate: AuthGate used for every decision.
        routes: (prefix, realm) pairs, longest prefix first.

    Class Attributes:
        middleware_name: "basicauth" - identifier for config.
    """

    middleware_name = "basicauth"

    __slots__ = ("gate", "routes")

    def __init__(self, app: ASGIApp, gate: AuthGate | None = None, **entries: Any) -> None:
        """Initialize basic auth middleware.

        Args:
            app: Next ASGI application in the middleware chain.
            gate: AuthGate instance. Defaults to AuthGate().
            **entries: Realm definitions by name (see module docstring).
        """
        super().__init__(app)
        self.gate = gate or AuthGate()
        self.routes: list[tuple[str, Realm]] = []
        for name, options in entries.items():
            self._configure_entry(name, options)

    @classmethod
    def from_config(
        cls,
        app: ASGIApp,
        path: str | Path | None = None,
        gate: AuthGate | None = None,
    ) -> BasicAuthMiddleware:
        """Build the middleware from a TOML file with [realms.<name>] tables.

        Args:
            app: Next ASGI application.
            path: Config file. Defaults to find_config_file().
            gate: AuthGate instance.

        Raises:
            ConfigError: If no config file is found or it is invalid.
        """
        config_path = Path(path) if path is not None else find_config_file()
        if config_path is None:
            raise ConfigError("No authgate configuration file found")
        return cls(app, gate=gate, **load_realm_entries(config_path))

    def _configure_entry(self, name: str, options: Any) -> None:
        """Register a realm entry from its config mapping.

        Note:
            Misconfigured entries are registered anyway and logged: a realm
            that matches no strategy challenges every request.
        """
        if hasattr(options, "as_dict"):
            options = options.as_dict()
        if not isinstance(options, Mapping):
            raise ConfigError(f"Realm entry '{name}' must be a mapping")
        entries = dict(options)
        route = str(entries.pop("route", "/"))
        realm = Realm.from_options(entries, default_name=name)
        if isinstance(realm.config, CredentialMap) and realm.config.unknown_keys:
            logger.warning(f"Realm '{name}' has unknown keys: {', '.join(realm.config.unknown_keys)}")
        if resolve_strategy(realm.config) is None:
            logger.warning(f"Realm '{name}' matches no strategy; every request will be challenged")
        self.protect(route, realm)

    def protect(self, route: str, realm: Realm) -> None:
        """Protect a URL prefix with a realm. Replaces an existing prefix."""
        prefix = _normalize_route(route)
        self.routes = [(p, r) for p, r in self.routes if p != prefix]
        self.routes.append((prefix, realm))
        self.routes.sort(key=lambda item: len(item[0]), reverse=True)

    def match(self, path: str) -> Realm | None:
        """Return the realm protecting path, or None."""
        for prefix, realm in self.routes:
            if prefix == "/" or path == prefix or path.startswith(prefix + "/"):
                return realm
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process request with Basic authentication.

        Note:
            Non-HTTP scopes and unprotected paths pass through untouched.
        """
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        realm = self.match(scope.get("path", "/"))
        if realm is None:
            await self.app(scope, receive, send)
            return

        request = HttpRequest(scope)
        outcome = await smartasync(self.gate.authenticate)(request, realm)
        if outcome:
            auth: AuthInfo = {
                "identity": outcome.username,
                "tags": [],
                "backend": f"basic:{outcome.strategy}",
                "realm": realm.name,
            }
            scope["auth"] = auth
            await self.app(scope, receive, send)
            return

        logger.debug(f"401 {request.method} {request.path} realm={realm.name!r} id={request.id}")
        await request.response(scope, receive, send)


if __name__ == "__main__":
    pass
