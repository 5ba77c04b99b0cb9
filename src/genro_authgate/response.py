# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
HTTP Response used by the authentication gate.

Response is created empty by HttpRequest and linked to it. The gate only
touches it on failure: ChallengeResponder sets the challenge header and
status, then calls finalize() so nothing else can be written.

Main Pattern
============
::

    request = HttpRequest(scope)
    outcome = gate.authenticate(request, realm)
    if not outcome:
        await request.response(scope, receive, send)   # sends the 401

Response Methods
================
set_header(name, value)
    Add a response header.

set_result(result)
    Set body from str, bytes or None.

finalize()
    Seal the response. Later set_header/set_result raise
    ResponseFinalizedError.
"""

from __future__ import annotations

from typing import Any

from .exceptions import ResponseFinalizedError
from .types import Receive, Scope, Send

__all__ = ["Response"]


class Response:
    """
    HTTP response sent through the ASGI interface.

    Implements ``__call__`` to be usable as an ASGI application.

    Attributes:
        body: Encoded response body as bytes.
        status_code: HTTP status code.
        rendered: True once finalize() has been called.
        request: Owning request (may be None).

    Example:
        >>> response = Response()
        >>> response.set_header("WWW-Authenticate", 'Basic realm="Staff"')
        >>> response.status_code = 401
        >>> response.finalize()
        >>> await response(scope, receive, send)
    """

    __slots__ = ("body", "status_code", "rendered", "_media_type", "_headers", "request")

    charset: str = "utf-8"

    def __init__(self, status_code: int = 200, request: Any = None) -> None:
        """
        Initialize an empty response.

        Args:
            status_code: HTTP status code (default 200).
            request: Request this response belongs to.
        """
        self.request = request
        self.status_code = status_code
        self.rendered = False
        self._headers: list[tuple[str, str]] = []
        self._media_type: str | None = None
        self.body = b""

    def _encode_content(self, content: bytes | str | None) -> bytes:
        """Encode response content to bytes (None becomes b"")."""
        if content is None:
            return b""
        if isinstance(content, bytes):
            return content
        return content.encode(self.charset)

    def _get_content_type(self) -> str | None:
        """Get content-type header value with charset for text types."""
        if self._media_type is None:
            return None
        if self._media_type.startswith("text/") and "charset" not in self._media_type:
            return f"{self._media_type}; charset={self.charset}"
        return self._media_type

    def _check_writable(self) -> None:
        if self.rendered:
            raise ResponseFinalizedError("Response already rendered")

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Copy of the response headers as (name, value) tuples."""
        return list(self._headers)

    def get_header(self, name: str) -> str | None:
        """Return the first header value with the given name (case-insensitive)."""
        lowered = name.lower()
        for header_name, value in self._headers:
            if header_name.lower() == lowered:
                return value
        return None

    def set_header(self, name: str, value: str) -> None:
        """Set a response header. Raises if the response is finalized."""
        self._check_writable()
        self._headers.append((name, value))

    def set_result(self, result: str | bytes | None, media_type: str | None = None) -> None:
        """Set response body from result.

        Args:
            result: str (text/plain), bytes (application/octet-stream) or None.
            media_type: Overrides the type-based default.

        Raises:
            ResponseFinalizedError: If the response is finalized.
        """
        self._check_writable()
        if isinstance(result, bytes):
            self.body = result
            self._media_type = media_type or "application/octet-stream"
        else:
            self.body = self._encode_content(result)
            self._media_type = media_type or "text/plain"

    def finalize(self) -> None:
        """Mark the response as rendered. No further writes are allowed."""
        self.rendered = True

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        """
        Build ASGI headers list with content-type and content-length.

        Header names are lowercased and encoded as latin-1 (HTTP standard).
        """
        headers = [
            (name, value)
            for name, value in self._headers
            if name.lower() not in ("content-type", "content-length")
        ]
        content_type = self._get_content_type()
        if content_type:
            headers.append(("content-type", content_type))
        headers.append(("content-length", str(len(self.body))))
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """
        ASGI application interface.

        Sends http.response.start and http.response.body messages.
        """
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": self.body,
            }
        )

    def __repr__(self) -> str:
        return f"<Response status={self.status_code} rendered={self.rendered}>"
