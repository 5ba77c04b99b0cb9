# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Type definitions for genro-authgate.

ASGI Types
==========
The gate plugs into an ASGI pipeline, so it shares the usual aliases::

    Scope   = MutableMapping[str, Any]
    Message = MutableMapping[str, Any]
    Receive = Callable[[], Awaitable[Message]]
    Send    = Callable[[Message], Awaitable[None]]
    ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

MutableMapping is used instead of TypedDict because ASGI servers add their
own extension keys to scopes and messages.

Authentication Types
====================
VerifyCallback : Callable[[str, str], Any]
    Inline verification callback. Called as ``fn(username, password)``;
    any truthy return value grants access.

AuthInfo : dict[str, Any]
    Value stored in ``scope["auth"]`` by BasicAuthMiddleware::

        {"identity": "alice", "tags": [], "backend": "basic:file", "realm": "Staff"}
"""

from typing import Any, Awaitable, Callable, MutableMapping

__all__ = ["Scope", "Message", "Receive", "Send", "ASGIApp", "VerifyCallback", "AuthInfo"]

# ASGI Scope - connection metadata
Scope = MutableMapping[str, Any]

# ASGI Message - sent/received data
Message = MutableMapping[str, Any]

# ASGI Receive - callable to receive messages
Receive = Callable[[], Awaitable[Message]]

# ASGI Send - callable to send messages
Send = Callable[[Message], Awaitable[None]]

# ASGI Application - the main callable
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

# Inline verification callback: fn(username, password) -> truthy on success
VerifyCallback = Callable[[str, str], Any]

# scope["auth"] payload set on successful authentication
AuthInfo = dict[str, Any]
