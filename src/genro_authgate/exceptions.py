# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for genro-authgate.

Authentication failures are NOT exceptions: a wrong password, a missing
Authorization header and a misconfigured realm all end in the same 401
challenge. The classes below cover the remaining cases, which never reach
the client as distinct errors.

Module Structure
----------------
AuthGateError
    Common base, so callers can catch every gate error in one clause.

RealmConfigError (AuthGateError, ValueError)
    Programming error while building a realm, e.g. a CallbackRealm
    constructed with something that is not callable. Raised at
    registration time, never while handling a request.

CredentialStoreError (AuthGateError)
    The credential file could not be read. FileChecker converts it to a
    failed verification.

DirectoryError (AuthGateError)
    The directory server could not be reached or rejected the service
    bind. DirectoryChecker converts it to a failed verification.

ResponseFinalizedError (AuthGateError, RuntimeError)
    Something tried to modify a Response after the challenge sealed it.

Example:
    >>> try:
    ...     PasswdFile("/missing").authenticate("alice", "secret")
    ... except CredentialStoreError as e:
    ...     logger.warning(f"Credential file unavailable: {e}")
"""

__all__ = [
    "AuthGateError",
    "RealmConfigError",
    "CredentialStoreError",
    "DirectoryError",
    "ResponseFinalizedError",
]


class AuthGateError(Exception):
    """Base class for genro-authgate errors."""


class RealmConfigError(AuthGateError, ValueError):
    """Invalid realm definition supplied at registration time."""


class CredentialStoreError(AuthGateError):
    """
    Credential file could not be read.

    Attributes:
        path: Path of the credential file.
    """

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        message = f"Cannot read credential file {path!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def __repr__(self) -> str:
        return f"CredentialStoreError(path={self.path!r}, detail={self.detail!r})"


class DirectoryError(AuthGateError):
    """
    Directory server unreachable or service bind refused.

    Attributes:
        host: Directory host that failed.
    """

    def __init__(self, host: str, detail: str = "") -> None:
        self.host = host
        self.detail = detail
        message = f"Directory lookup on {host!r} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def __repr__(self) -> str:
        return f"DirectoryError(host={self.host!r}, detail={self.detail!r})"


class ResponseFinalizedError(AuthGateError, RuntimeError):
    """Response was already rendered and cannot be modified."""
