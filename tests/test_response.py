# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for Response."""

from __future__ import annotations

from typing import Any

import pytest

from genro_authgate import Response, ResponseFinalizedError


class MockSend:
    """Capture ASGI send messages for testing."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)


class TestResponse:
    """Tests for Response construction and writes."""

    def test_defaults(self) -> None:
        """A new response is empty, 200 and writable."""
        response = Response()
        assert response.status_code == 200
        assert response.body == b""
        assert response.rendered is False
        assert response.headers == []

    def test_headers(self) -> None:
        """get_header returns the first value, case-insensitively."""
        response = Response()
        response.set_header("X-A", "1")
        response.set_header("X-A", "2")
        assert response.headers == [("X-A", "1"), ("X-A", "2")]
        assert response.get_header("x-a") == "1"
        assert response.get_header("x-b") is None

    def test_set_result(self) -> None:
        """set_result encodes text as UTF-8 and keeps bytes as they are."""
        response = Response()
        response.set_result("caf\xe9")
        assert response.body == "caf\xe9".encode("utf-8")
        response.set_result(b"\x00\x01")
        assert response.body == b"\x00\x01"
        response.set_result(None)
        assert response.body == b""

    def test_finalize_blocks_writes(self) -> None:
        """A finalized response refuses further writes."""
        response = Response()
        response.finalize()
        with pytest.raises(ResponseFinalizedError):
            response.set_header("X-A", "1")
        with pytest.raises(ResponseFinalizedError):
            response.set_result("late")

    def test_finalized_error_is_runtime_error(self) -> None:
        """ResponseFinalizedError can be caught as RuntimeError."""
        response = Response()
        response.finalize()
        with pytest.raises(RuntimeError):
            response.set_header("X-A", "1")


class TestResponseASGI:
    """Tests for sending a Response over ASGI."""

    @pytest.mark.asyncio
    async def test_send_challenge(self) -> None:
        """The challenge is sent as start + body messages."""
        response = Response()
        response.set_header("WWW-Authenticate", 'Basic realm="Staff"')
        response.status_code = 401
        response.finalize()
        send = MockSend()
        await response({"type": "http"}, None, send)

        start, body = send.messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 401
        assert (b"www-authenticate", b'Basic realm="Staff"') in start["headers"]
        assert (b"content-length", b"0") in start["headers"]
        assert body == {"type": "http.response.body", "body": b""}

    @pytest.mark.asyncio
    async def test_content_type(self) -> None:
        """Text media types get a charset."""
        response = Response()
        response.set_result("hello", media_type="text/plain")
        send = MockSend()
        await response({"type": "http"}, None, send)

        headers = dict(send.messages[0]["headers"])
        assert headers[b"content-type"] == b"text/plain; charset=utf-8"
        assert headers[b"content-length"] == b"5"
