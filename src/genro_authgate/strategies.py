# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Strategy resolution for realm configs.

resolve_strategy() inspects a RealmConfig and returns the verification
strategy that applies. Rules are evaluated in this exact order, first match
wins:

    1. CallbackRealm                          -> CallbackStrategy
    2. non-empty "username" AND "password"    -> InlineCredentials
    3. "path"                                 -> FileLookup
    4. "host"                                 -> DirectoryLookup
    5. anything else                          -> None (forces a challenge)

A "host" map whose port or timeout is not numeric also resolves to None.

Rule 2 wins over 3 and 4: a map holding both a username/password pair and
a host is compared against the inline pair, the directory keys are ignored.

Directory parameters are layered with SmartOptions, so unset keys fall back
to DIRECTORY_DEFAULTS::

    DirectoryLookup(host="ldap.company.com", filter="(uid=%s)", scope="sub", ...)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

from .realm import CallbackRealm, CredentialMap, RealmConfig
from .types import VerifyCallback

__all__ = [
    "CallbackStrategy",
    "InlineCredentials",
    "FileLookup",
    "DirectoryLookup",
    "Strategy",
    "DIRECTORY_DEFAULTS",
    "resolve_strategy",
]

DIRECTORY_DEFAULTS = {"filter": "(uid=%s)", "scope": "sub"}

DIRECTORY_KEYS = ("host", "port", "basedn", "binddn", "bindpw", "filter", "scope", "timeout")

FILE_OPTION_KEYS = ("encoding",)


@dataclass(frozen=True)
class CallbackStrategy:
    """Verify through an inline callback."""

    fn: VerifyCallback
    kind: str = field(default="callback", init=False)


@dataclass(frozen=True)
class InlineCredentials:
    """Compare against a configured username and plain/hashed password."""

    username: str
    password: str
    kind: str = field(default="inline", init=False)

    def __repr__(self) -> str:
        return f"InlineCredentials(username={self.username!r}, password=***)"


@dataclass(frozen=True)
class FileLookup:
    """Look the user up in a colon-delimited credential file."""

    path: str
    options: dict[str, Any] = field(default_factory=dict)
    kind: str = field(default="file", init=False)


@dataclass(frozen=True)
class DirectoryLookup:
    """Bind against an LDAP or Active Directory server."""

    host: str
    basedn: str | None = None
    binddn: str | None = None
    bindpw: str | None = None
    filter: str = DIRECTORY_DEFAULTS["filter"]
    port: int | None = None
    scope: str = DIRECTORY_DEFAULTS["scope"]
    timeout: float | None = None
    kind: str = field(default="directory", init=False)

    def __repr__(self) -> str:
        return (
            f"DirectoryLookup(host={self.host!r}, basedn={self.basedn!r}, "
            f"binddn={self.binddn!r}, filter={self.filter!r})"
        )

    def as_options(self) -> dict[str, Any]:
        """Keyword arguments for a directory authenticator factory."""
        return {
            "host": self.host,
            "basedn": self.basedn,
            "binddn": self.binddn,
            "bindpw": self.bindpw,
            "filter": self.filter,
            "port": self.port,
            "scope": self.scope,
            "timeout": self.timeout,
        }


Strategy = Union[CallbackStrategy, InlineCredentials, FileLookup, DirectoryLookup]


def resolve_strategy(config: RealmConfig) -> Strategy | None:
    """Pick the verification strategy for a realm config.

    Args:
        config: CallbackRealm or CredentialMap.

    Returns:
        The matching strategy, or None when the map matches no rule.
    """
    if isinstance(config, CallbackRealm):
        return CallbackStrategy(config.fn)
    if not isinstance(config, CredentialMap):
        return None

    username = config.get("username")
    password = config.get("password")
    if username and password:
        return InlineCredentials(str(username), str(password))
    if "path" in config:
        return _file_lookup(config)
    if "host" in config:
        return _directory_lookup(config)
    return None


def _file_lookup(config: CredentialMap) -> FileLookup:
    options = {key: config.get(key) for key in FILE_OPTION_KEYS if config.get(key) is not None}
    return FileLookup(str(config.get("path") or ""), options)


def _directory_lookup(config: CredentialMap) -> DirectoryLookup | None:
    """Build a DirectoryLookup, or None when port/timeout are not numeric."""
    opts = SmartOptions(DIRECTORY_DEFAULTS) + SmartOptions(
        {key: config.get(key) for key in DIRECTORY_KEYS},
        ignore_none=True,
    )
    try:
        port = int(opts["port"]) if opts["port"] is not None else None
        timeout = float(opts["timeout"]) if opts["timeout"] is not None else None
    except (TypeError, ValueError):
        return None
    return DirectoryLookup(
        host=str(opts["host"] or ""),
        basedn=opts["basedn"],
        binddn=opts["binddn"],
        bindpw=opts["bindpw"],
        filter=str(opts["filter"]),
        port=port,
        scope=str(opts["scope"]),
        timeout=timeout,
    )
