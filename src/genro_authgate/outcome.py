# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Authentication outcomes.

Every request resolves to exactly one outcome, synchronously:

    Authenticated(username, strategy)   truthy, response untouched
    Challenge(realm_name)               falsy, 401 already written

Truthiness lets route code read like ``if gate.authenticate(...):``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = ["Authenticated", "Challenge", "AuthOutcome"]


@dataclass(frozen=True)
class Authenticated:
    """Credentials verified."""

    username: str
    strategy: str

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Challenge:
    """Credentials missing or rejected; a 401 challenge was issued."""

    realm_name: str

    def __bool__(self) -> bool:
        return False


AuthOutcome = Union[Authenticated, Challenge]
