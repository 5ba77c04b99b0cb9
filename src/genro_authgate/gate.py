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

"""AuthGate - Basic authentication dispatch.

AuthGate takes a request and a realm and decides: authenticated, or 401.

Decision flow::

    raw = request.credentials                      # "user:pass" or ""
    strategy = resolve_strategy(realm.config)

    1. raw empty and strategy is not a callback   -> Challenge
    2. callback                                    -> fn(user, pass) truthy?
    3. inline credentials, raw == "user:password"  -> Authenticated (literal)
    4. raw non-empty                               -> checker for strategy kind
    5. otherwise                                   -> Challenge

The callback is the only strategy invoked with empty credentials, so
callbacks must handle ("", "") themselves.

Literal fast path:
    Step 3 compares the raw string with the configured pair verbatim. A
    realm configured with a hashed password therefore also accepts the
    hash itself as the password, bypassing the hash comparison. This
    matches the behaviour existing deployments rely on; do not expose
    configured hashes.

Failure modes are indistinguishable to the client: missing header, wrong
password, unreachable directory and a config map that matches no strategy
all produce the same 401 with ``WWW-Authenticate: Basic realm="<name>"``.

The gate holds no per-request state. One instance can serve concurrent
requests from several threads.

Example::

    gate = AuthGate()
    realm = Realm("Staff", CredentialMap({"path": "/etc/app/htpasswd"}))

    request = HttpRequest(scope)
    if gate.authenticate(request, realm):
        ...  # proceed to handler
    else:
        await request.response(scope, receive, send)  # 401
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from .challenge import ChallengeResponder
from .checkers import CHECKER_REGISTRY, Checker
from .credentials import extract_credentials, split_credentials
from .outcome import Authenticated, AuthOutcome, Challenge
from .strategies import CallbackStrategy, InlineCredentials, Strategy, resolve_strategy

if TYPE_CHECKING:
    from .realm import Realm
    from .request import HttpRequest

__all__ = ["AuthGate"]

logger = logging.getLogger("genro_authgate.gate")


class AuthGate:
    """Dispatch Basic credentials to the strategy a realm selects.

    Attributes:
        checkers: Checker instance per strategy kind ("inline", "file",
            "directory"). Defaults come from CHECKER_REGISTRY.
        responder: Writes the 401 challenge.
    """

    __slots__ = ("checkers", "responder")

    def __init__(
        self,
        checkers: Mapping[str, Checker] | None = None,
        responder: ChallengeResponder | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            checkers: Overrides for the default checkers, keyed by kind.
            responder: Challenge writer. Defaults to ChallengeResponder().
        """
        self.checkers: dict[str, Checker] = {
            kind: checker_cls() for kind, checker_cls in CHECKER_REGISTRY.items()
        }
        if checkers:
            self.checkers.update(checkers)
        self.responder = responder or ChallengeResponder()

    def authenticate(self, request: HttpRequest, realm: Realm) -> AuthOutcome:
        """Authenticate a request against a realm.

        Args:
            request: Request exposing ``credentials`` and ``response``.
            realm: Realm name and config.

        Returns:
            Authenticated (truthy) or Challenge (falsy, 401 written on
            request.response).
        """
        raw = extract_credentials(request)
        strategy = resolve_strategy(realm.config)

        if strategy is None:
            logger.debug(f"Realm {realm.name!r} matches no strategy")
            return self._challenge(request, realm)

        if not raw and not isinstance(strategy, CallbackStrategy):
            logger.debug(f"No credentials supplied for realm {realm.name!r}")
            return self._challenge(request, realm)

        credentials = split_credentials(raw)

        if isinstance(strategy, CallbackStrategy):
            if strategy.fn(credentials.username, credentials.password):
                return self._authenticated(credentials.username, strategy, realm)
            return self._challenge(request, realm)

        if isinstance(strategy, InlineCredentials) and self._literal_match(raw, strategy):
            return self._authenticated(credentials.username, strategy, realm)

        checker = self.checkers.get(strategy.kind)
        if raw and checker is not None and checker.check(raw, strategy):
            return self._authenticated(credentials.username, strategy, realm)

        logger.debug(
            f"Verification failed for {credentials.username!r} "
            f"in realm {realm.name!r} ({strategy.kind})"
        )
        return self._challenge(request, realm)

    def _literal_match(self, raw: str, strategy: InlineCredentials) -> bool:
        expected = f"{strategy.username}:{strategy.password}"
        return hmac.compare_digest(raw.encode("utf-8"), expected.encode("utf-8"))

    def _authenticated(self, username: str, strategy: Strategy, realm: Realm) -> Authenticated:
        logger.debug(f"Authenticated {username!r} in realm {realm.name!r} ({strategy.kind})")
        return Authenticated(username, strategy.kind)

    def _challenge(self, request: HttpRequest, realm: Realm) -> Challenge:
        return self.responder.challenge(request.response, realm.name)

    def __repr__(self) -> str:
        return f"AuthGate(checkers={sorted(self.checkers)})"
