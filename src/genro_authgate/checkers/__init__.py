# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Credential checkers for AuthGate.

Each checker adapts one external verification primitive:

Exports:
    Checker: ABC for checkers
    PasswordChecker: InlineCredentials via HashChecker (passlib)
    FileChecker: FileLookup via PasswdFile
    DirectoryChecker: DirectoryLookup via LdapAuthenticator (ldap3)
    CHECKER_REGISTRY: Dict mapping strategy kind to checker class
"""

from .base import Checker
from .directory import DirectoryAuthenticator, DirectoryChecker, LdapAuthenticator
from .passwd import FileAuthenticator, FileChecker, PasswdFile
from .password import HashChecker, PasswordChecker

CHECKER_REGISTRY: dict[str, type[Checker]] = {
    "inline": PasswordChecker,
    "file": FileChecker,
    "directory": DirectoryChecker,
}

__all__ = [
    "Checker",
    "HashChecker",
    "PasswordChecker",
    "FileAuthenticator",
    "PasswdFile",
    "FileChecker",
    "DirectoryAuthenticator",
    "LdapAuthenticator",
    "DirectoryChecker",
    "CHECKER_REGISTRY",
]
