# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Password comparison against plaintext or hashed configured values.

HashChecker decides the format by looking at the configured value, never
at the realm config. Checks run in this order:

    1. plaintext equality (constant time)
    2. passlib CryptContext identification of the configured value

Supported encodings (via passlib):
    - crypt(3) DES:          "MlQ8OC3xHPIi."
    - MD5-crypt:             "$1$..."
    - Apache MD5:            "$apr1$..."
    - SHA-crypt:             "$5$...", "$6$..."
    - bcrypt:                "$2b$..." (needs a bcrypt backend)
    - LDAP digests:          "{SHA}...", "{SSHA}...", "{MD5}...", "{SMD5}..."
    - LDAP crypt wrappers:   "{CRYPT}$1$...", "{CRYPT}..."
    - hex digests:           md5, sha1, sha256, sha512

Values that match no format only ever succeed through plaintext equality.
"""

from __future__ import annotations

import hmac

from passlib.context import CryptContext
from passlib.exc import MissingBackendError

from ..credentials import Credentials
from ..strategies import InlineCredentials
from .base import Checker, logger

__all__ = ["HashChecker", "PasswordChecker", "HASH_SCHEMES"]

# Order matters: identification stops at the first scheme that claims the value
HASH_SCHEMES = [
    "bcrypt",
    "sha512_crypt",
    "sha256_crypt",
    "md5_crypt",
    "apr_md5_crypt",
    "ldap_salted_sha1",
    "ldap_salted_sha256",
    "ldap_salted_sha512",
    "ldap_salted_md5",
    "ldap_sha1",
    "ldap_md5",
    "ldap_sha512_crypt",
    "ldap_sha256_crypt",
    "ldap_md5_crypt",
    "ldap_des_crypt",
    "des_crypt",
    "hex_sha512",
    "hex_sha256",
    "hex_sha1",
    "hex_md5",
]


class HashChecker:
    """Verify a password against a plaintext or hashed configured value.

    Attributes:
        context: passlib CryptContext used for hashed values.
    """

    __slots__ = ("context",)

    def __init__(self, schemes: list[str] | None = None) -> None:
        self.context = CryptContext(schemes=schemes or HASH_SCHEMES)

    def identify(self, configured: str) -> str | None:
        """Return the passlib scheme name for a configured value, or None."""
        try:
            return self.context.identify(configured)
        except (ValueError, TypeError):
            return None

    def verify(self, password: str, configured: str) -> bool:
        """Check a plaintext password against the configured value.

        Args:
            password: Password sent by the client.
            configured: Plaintext or hashed value from configuration.

        Returns:
            True if the values match as plaintext or the hash accepts the
            password. Unrecognized hashes and missing backends give False.
        """
        if not configured:
            return False
        if hmac.compare_digest(password.encode("utf-8"), configured.encode("utf-8")):
            return True
        scheme = self.identify(configured)
        if scheme is None:
            return False
        try:
            return bool(self.context.verify(password, configured))
        except MissingBackendError as e:
            logger.warning(f"No backend for hash scheme {scheme}: {e}")
            return False
        except (ValueError, TypeError) as e:
            logger.debug(f"Hash verification rejected value for scheme {scheme}: {e}")
            return False


class PasswordChecker(Checker):
    """Checker for InlineCredentials realms.

    Succeeds if the username matches exactly and the HashChecker accepts
    the password against the configured value.
    """

    strategy_kind = "inline"

    __slots__ = ("hash_checker",)

    def __init__(self, hash_checker: HashChecker | None = None) -> None:
        self.hash_checker = hash_checker or HashChecker()

    def verify(self, credentials: Credentials, strategy: InlineCredentials) -> bool:
        if credentials.username != strategy.username:
            return False
        return self.hash_checker.verify(credentials.password, strategy.password)
