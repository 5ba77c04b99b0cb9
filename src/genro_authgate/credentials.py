# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Credential extraction for HTTP Basic authentication.

The transport credential string is the base64-decoded payload of an
``Authorization: Basic <b64>`` header, conventionally ``"username:password"``.

Splitting rule:
    Split on the FIRST colon only. Usernames cannot contain a colon,
    passwords can::

        split_credentials("alice:se:cret")  # Credentials("alice", "se:cret")
        split_credentials("alice")          # Credentials("alice", "")

Absent credentials are always the empty string, never None, so checkers
can tell "no header" apart from "header with empty password" by looking
at the raw string.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Protocol

__all__ = [
    "Credentials",
    "CredentialSource",
    "decode_basic_authorization",
    "extract_credentials",
    "split_credentials",
]


@dataclass(frozen=True, slots=True)
class Credentials:
    """Username/password pair parsed from a single request."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=***)"


class CredentialSource(Protocol):
    """Anything exposing the decoded Basic credential string."""

    @property
    def credentials(self) -> str: ...


def decode_basic_authorization(header: str | None) -> str:
    """Decode an Authorization header value into "user:pass".

    Args:
        header: Raw header value, e.g. "Basic YWxpY2U6c2VjcmV0".

    Returns:
        Decoded credential string, or "" if the header is missing, uses a
        different scheme, or is not valid base64/UTF-8.
    """
    if not header or " " not in header:
        return ""
    scheme, encoded = header.split(" ", 1)
    if scheme.lower() != "basic":
        return ""
    try:
        return base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError, UnicodeDecodeError):
        return ""


def extract_credentials(request: CredentialSource) -> str:
    """Return the request's decoded credential string ("" when absent)."""
    return request.credentials or ""


def split_credentials(raw: str) -> Credentials:
    """Split raw "user:pass" on the first colon (max 2 parts)."""
    username, _, password = raw.partition(":")
    return Credentials(username, password)
