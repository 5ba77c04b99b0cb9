# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Credential file lookup.

Any standard passwd/htpasswd style file is supported: one record per line,
fields separated by ":", first field the username, second field the plain
or hashed password. Further fields (passwd GECOS, home, shell) are ignored.

    # comment lines and blank lines are skipped
    alice:secret
    bob:$apr1$<salt>$<digest>
    carol:{SSHA}...:1001:1001:Carol:/home/carol:/bin/sh

The file is read on every call, so edits take effect on the next request.
The first record for a username wins. An empty stored password never
matches.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Protocol

from ..credentials import Credentials
from ..exceptions import CredentialStoreError
from ..strategies import FileLookup
from .base import Checker, logger
from .password import HashChecker

__all__ = ["FileAuthenticator", "PasswdFile", "FileChecker"]


class FileAuthenticator(Protocol):
    """File-backed credential store."""

    def authenticate(self, username: str, password: str) -> bool: ...


class PasswdFile:
    """Colon-delimited credential file.

    Attributes:
        path: Location of the credential file.
        encoding: Text encoding of the file.
        hash_checker: Comparison primitive for the stored password field.
    """

    __slots__ = ("path", "encoding", "hash_checker")

    def __init__(
        self,
        path: str | Path,
        encoding: str = "utf-8",
        hash_checker: HashChecker | None = None,
    ) -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.hash_checker = hash_checker or HashChecker()

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError, LookupError) as e:
            raise CredentialStoreError(str(self.path), str(e)) from e

    def records(self) -> Iterator[tuple[str, str]]:
        """Yield (username, stored_password) for every record line.

        Raises:
            CredentialStoreError: If the file cannot be read or decoded.
        """
        for line in self._read().splitlines():
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            fields = line.split(":")
            yield fields[0], fields[1] if len(fields) > 1 else ""

    def lookup(self, username: str) -> str | None:
        """Return the stored password field for username, or None."""
        for record_user, stored in self.records():
            if record_user == username:
                return stored
        return None

    def authenticate(self, username: str, password: str) -> bool:
        """Check username/password against the file.

        Raises:
            CredentialStoreError: If the file cannot be read or decoded.
        """
        if not username:
            return False
        stored = self.lookup(username)
        if not stored:
            return False
        return self.hash_checker.verify(password, stored)

    def __repr__(self) -> str:
        return f"PasswdFile(path={str(self.path)!r})"


class FileChecker(Checker):
    """Checker for FileLookup realms.

    Attributes:
        authenticator_factory: Called as factory(path, **options) per request.
    """

    strategy_kind = "file"

    __slots__ = ("authenticator_factory",)

    def __init__(
        self,
        authenticator_factory: Callable[..., FileAuthenticator] | None = None,
        hash_checker: HashChecker | None = None,
    ) -> None:
        if authenticator_factory is None:
            authenticator_factory = functools.partial(
                PasswdFile, hash_checker=hash_checker or HashChecker()
            )
        self.authenticator_factory = authenticator_factory

    def verify(self, credentials: Credentials, strategy: FileLookup) -> bool:
        username = credentials.username or ""
        password = credentials.password or ""
        try:
            authenticator = self.authenticator_factory(strategy.path, **strategy.options)
            return bool(authenticator.authenticate(username, password))
        except (CredentialStoreError, OSError) as e:
            logger.warning(f"Credential file check failed for {strategy.path!r}: {e}")
            return False
