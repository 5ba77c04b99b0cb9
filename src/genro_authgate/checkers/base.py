# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Base class for credential checkers.

A checker is a thin adapter between AuthGate and one external verification
primitive (hash comparison, credential file, directory server). Checkers
return a plain bool. Collaborator faults are caught here and logged, so no
exception reaches the gate and a fault can never grant access.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..credentials import Credentials, split_credentials

__all__ = ["Checker", "logger"]

logger = logging.getLogger("genro_authgate.checkers")


class Checker(ABC):
    """Base class for strategy checkers.

    Subclasses set ``strategy_kind`` and implement verify().
    """

    strategy_kind: str = ""  # matches Strategy.kind

    def check(self, raw: str, strategy: Any) -> bool:
        """Split the raw credential string and verify it.

        Args:
            raw: Decoded "user:pass" string from the request.
            strategy: Resolved strategy for the realm.

        Returns:
            True only if the collaborator accepts the credentials. Any
            exception raised by verify() is logged and gives False.
        """
        try:
            return bool(self.verify(split_credentials(raw or ""), strategy))
        except Exception as e:
            logger.warning(f"{type(self).__name__} failed ({type(e).__name__}): {e}")
            return False

    @abstractmethod
    def verify(self, credentials: Credentials, strategy: Any) -> bool:
        """Verify split credentials against the strategy's source."""
        ...
