# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Realm definitions.

A realm couples a display name (shown in ``WWW-Authenticate``) with a
RealmConfig, the explicit tagged variant that selects how credentials are
verified:

    CallbackRealm(fn)
        Inline verification callback ``fn(username, password)``.

    CredentialMap(entries)
        Mapping whose keys pick the strategy (see strategies.py):
        ``username``/``password``, ``path``, or ``host`` plus
        ``basedn``/``binddn``/``bindpw``/``filter``.

Realms are built once per protected route and are read-only afterwards,
so the same instance can be shared by concurrent requests.

Example::

    Realm("Admin Area", CredentialMap({"username": "admin", "password": "$apr1$..."}))
    Realm("Staff", CredentialMap({"host": "ldap.company.com", "basedn": "ou=People,dc=company,dc=com"}))
    Realm("API", CallbackRealm(lambda user, pw: user == "svc" and pw == token))

    # single-mapping form, realm name inside the mapping
    Realm.from_options({"realm": "Admin Area", "username": "admin", "password": "secret"})
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from .exceptions import RealmConfigError
from .types import VerifyCallback

__all__ = [
    "CallbackRealm",
    "CredentialMap",
    "RealmConfig",
    "Realm",
    "CREDENTIAL_KEYS",
]

# Keys recognized inside a CredentialMap
CREDENTIAL_KEYS = frozenset(
    {
        "username",
        "password",
        "path",
        "encoding",
        "host",
        "port",
        "basedn",
        "binddn",
        "bindpw",
        "filter",
        "scope",
        "timeout",
    }
)


@dataclass(frozen=True)
class CallbackRealm:
    """Realm verified by an inline callback."""

    fn: VerifyCallback

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise RealmConfigError(f"CallbackRealm requires a callable, got {type(self.fn).__name__}")


@dataclass(frozen=True)
class CredentialMap:
    """Realm verified against configured credentials or a credential source."""

    entries: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.entries, Mapping):
            raise RealmConfigError(
                f"CredentialMap requires a mapping, got {type(self.entries).__name__}"
            )
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, key: str, default: Any = None) -> Any:
        return self.entries.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    @property
    def unknown_keys(self) -> list[str]:
        """Keys that no strategy will ever look at."""
        return sorted(key for key in self.entries if key not in CREDENTIAL_KEYS)


RealmConfig = Union[CallbackRealm, CredentialMap]


@dataclass(frozen=True)
class Realm:
    """Protected realm: display name plus verification config."""

    name: str
    config: RealmConfig

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise RealmConfigError(f"Realm name must be a string, got {type(self.name).__name__}")
        # the name goes into a header value
        try:
            self.name.encode("latin-1")
        except UnicodeEncodeError as e:
            raise RealmConfigError(f"Realm name {self.name!r} is not latin-1 encodable") from e
        if not isinstance(self.config, (CallbackRealm, CredentialMap)):
            raise RealmConfigError(
                f"Realm config must be CallbackRealm or CredentialMap, "
                f"got {type(self.config).__name__}"
            )

    @classmethod
    def from_options(cls, options: Mapping[str, Any], default_name: str = "") -> Realm:
        """Build a realm from a single mapping holding the name under "realm".

        Args:
            options: Mapping with an optional "realm" key plus credential keys.
            default_name: Name used when "realm" is missing.
        """
        entries = dict(options)
        name = entries.pop("realm", None) or default_name
        return cls(str(name), CredentialMap(entries))

    def __repr__(self) -> str:
        kind = "callback" if isinstance(self.config, CallbackRealm) else "map"
        return f"Realm(name={self.name!r}, config={kind})"
