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
HTTP request adapter for the authentication gate.

HttpRequest wraps an ASGI HTTP scope and exposes what the gate needs:
the lowercase header dict and the decoded Basic credential string. Each
request owns an empty Response that the gate fills in on failure.

The request never reads the body, so construction is synchronous and can
happen inside a worker thread.

Example:
    request = HttpRequest(scope)
    request.credentials      # "alice:secret" or "" if no Basic header
    request.response         # Response, untouched unless challenged
"""

from __future__ import annotations

import uuid

from .credentials import decode_basic_authorization
from .response import Response
from .types import Scope

__all__ = ["HttpRequest"]


class HttpRequest:
    """HTTP request adapter wrapping ASGI scope."""

    __slots__ = ("_scope", "_headers", "_id", "response")

    def __init__(self, scope: Scope) -> None:
        self._scope = scope
        self._headers: dict[str, str] = {}
        for name, value in scope.get("headers", []):
            self._headers[name.decode("latin-1").lower()] = value.decode("latin-1")
        self._id: str = self._headers.get("x-request-id", str(uuid.uuid4()))
        self.response: Response = Response(request=self)

    @property
    def id(self) -> str:
        """Correlation ID from X-Request-ID, or a generated UUID."""
        return self._id

    @property
    def method(self) -> str:
        return str(self._scope.get("method", "GET")).upper()

    @property
    def path(self) -> str:
        return str(self._scope.get("path", "/"))

    @property
    def headers(self) -> dict[str, str]:
        """Request headers (lowercase keys)."""
        return self._headers

    @property
    def authorization(self) -> str | None:
        """Raw Authorization header value, or None."""
        return self._headers.get("authorization")

    @property
    def credentials(self) -> str:
        """Decoded Basic credential string ("user:pass"), or "" if absent."""
        return decode_basic_authorization(self.authorization)

    def __repr__(self) -> str:
        return f"<HttpRequest id={self.id!r} method={self.method} path={self.path!r}>"
