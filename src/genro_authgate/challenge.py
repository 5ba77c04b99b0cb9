# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""401 challenge response.

The realm name is inserted verbatim into the header value. Callers must not
use names with embedded double quotes, which would break the header syntax.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .outcome import Challenge

if TYPE_CHECKING:
    from .response import Response

__all__ = ["ChallengeResponder"]


class ChallengeResponder:
    """Write the Basic challenge on a response and seal it."""

    status_code = 401

    def challenge(self, response: Response, realm_name: str) -> Challenge:
        """Set WWW-Authenticate and 401, finalize the response.

        A response that is already sealed is left as it is.

        Returns:
            Falsy Challenge outcome, so the handler stops processing.
        """
        if response.rendered:
            return Challenge(realm_name)
        response.set_header("WWW-Authenticate", f'Basic realm="{realm_name}"')
        response.status_code = self.status_code
        response.finalize()
        return Challenge(realm_name)
