# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Directory (LDAP / Active Directory) credential lookup.

LdapAuthenticator talks to the server through ldap3:

    1. bind as ``binddn``/``bindpw``, or anonymously when no binddn is set
    2. search ``basedn`` with ``filter`` ("%s" replaced by the escaped username)
    3. require exactly one entry
    4. bind as that entry's DN with the user's password

Without ``basedn`` there is no search: the username is used directly as the
bind DN, which is the usual Active Directory ``user@domain`` form.

Config examples::

    # LDAP, anonymous search
    {"host": "ldap.company.com", "basedn": "ou=People,dc=company,dc=com"}

    # Active Directory, authenticated search
    {"host": "ad.company.com", "basedn": "dc=company,dc=com",
     "binddn": "cn=svc,ou=People,dc=company,dc=com", "bindpw": "secret",
     "filter": "(sAMAccountName=%s)"}

DirectoryChecker never contacts the server for an empty password: many
servers treat a DN with an empty password as an anonymous bind and report
success.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from ldap3 import BASE, LEVEL, NO_ATTRIBUTES, NONE, SUBTREE, Connection, Server
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from ..credentials import Credentials
from ..exceptions import DirectoryError
from ..strategies import DIRECTORY_DEFAULTS, DirectoryLookup
from .base import Checker, logger

__all__ = ["DirectoryAuthenticator", "LdapAuthenticator", "DirectoryChecker"]

SEARCH_SCOPES = {"base": BASE, "one": LEVEL, "sub": SUBTREE}


class DirectoryAuthenticator(Protocol):
    """Directory-backed credential store."""

    def authenticate(self, username: str, password: str) -> bool: ...


class LdapAuthenticator:
    """Authenticate users with an LDAP search-then-bind.

    Attributes:
        host: Server hostname, IP or ldap:// URL.
        basedn: Search base. None binds the username directly.
        binddn: DN for the search bind. None means anonymous.
        bindpw: Password for binddn.
        filter: Search filter template with a "%s" placeholder.
        port: Server port (None for the ldap3 default).
        scope: "base", "one" or "sub".
        timeout: Connect/receive timeout in seconds.
    """

    __slots__ = ("host", "basedn", "binddn", "bindpw", "filter", "port", "scope", "timeout")

    def __init__(
        self,
        host: str,
        basedn: str | None = None,
        binddn: str | None = None,
        bindpw: str | None = None,
        filter: str = DIRECTORY_DEFAULTS["filter"],
        port: int | None = None,
        scope: str = DIRECTORY_DEFAULTS["scope"],
        timeout: float | None = None,
    ) -> None:
        self.host = host
        self.basedn = basedn
        self.binddn = binddn
        self.bindpw = bindpw
        self.filter = filter
        self.port = port
        self.scope = scope
        self.timeout = timeout

    def _server(self) -> Any:
        return Server(self.host, port=self.port, get_info=NONE, connect_timeout=self.timeout)

    def _connection(self, server: Any, user: str | None, password: str | None) -> Any:
        return Connection(
            server,
            user=user,
            password=password,
            read_only=True,
            receive_timeout=self.timeout,
        )

    def search_filter(self, username: str) -> str:
        """Return the search filter for username, LDAP-escaped."""
        return self.filter.replace("%s", escape_filter_chars(username))

    def find_dn(self, server: Any, username: str) -> str | None:
        """Search basedn for the user and return its DN.

        Returns:
            The DN if exactly one entry matches, otherwise None.

        Raises:
            DirectoryError: If the service bind fails or the server errors.
        """
        conn = self._connection(server, self.binddn, self.bindpw)
        try:
            if not conn.bind():
                raise DirectoryError(self.host, f"service bind refused for {self.binddn or 'anonymous'}")
            conn.search(
                search_base=self.basedn,
                search_filter=self.search_filter(username),
                search_scope=SEARCH_SCOPES.get(self.scope, SUBTREE),
                attributes=NO_ATTRIBUTES,
            )
            entries = [item for item in conn.response or [] if item.get("type") == "searchResEntry"]
        finally:
            conn.unbind()

        if len(entries) != 1:
            logger.debug(f"Directory search for {username!r} returned {len(entries)} entries")
            return None
        dn: str = entries[0]["dn"]
        return dn

    def authenticate(self, username: str, password: str) -> bool:
        """Search the user and bind with the supplied password.

        Raises:
            DirectoryError: If the server cannot be reached or errors.
        """
        if not username or not password:
            return False
        try:
            server = self._server()
            dn = self.find_dn(server, username) if self.basedn else username
            if dn is None:
                return False
            conn = self._connection(server, dn, password)
            try:
                return bool(conn.bind())
            finally:
                conn.unbind()
        except LDAPException as e:
            raise DirectoryError(self.host, str(e)) from e

    def __repr__(self) -> str:
        return f"LdapAuthenticator(host={self.host!r}, basedn={self.basedn!r})"


class DirectoryChecker(Checker):
    """Checker for DirectoryLookup realms.

    Attributes:
        authenticator_factory: Called as factory(**DirectoryLookup.as_options())
            for each request that reaches the directory.
    """

    strategy_kind = "directory"

    __slots__ = ("authenticator_factory",)

    def __init__(
        self,
        authenticator_factory: Callable[..., DirectoryAuthenticator] | None = None,
    ) -> None:
        self.authenticator_factory = authenticator_factory or LdapAuthenticator

    def verify(self, credentials: Credentials, strategy: DirectoryLookup) -> bool:
        if not credentials.password:
            logger.debug(f"Empty password for {credentials.username!r}, directory not contacted")
            return False
        try:
            authenticator = self.authenticator_factory(**strategy.as_options())
            return bool(authenticator.authenticate(credentials.username, credentials.password))
        except DirectoryError as e:
            logger.warning(f"Directory check failed: {e}")
            return False
