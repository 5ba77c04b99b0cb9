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

"""genro-authgate - HTTP Basic authentication gate for ASGI applications.

A realm is verified by exactly one strategy, chosen by the shape of its
configuration:

    CallbackRealm(fn)                          inline callback
    CredentialMap({"username", "password"})    explicit pair, plain or hashed
    CredentialMap({"path"})                    passwd/htpasswd style file
    CredentialMap({"host", "basedn", ...})     LDAP / Active Directory

Main components:
    AuthGate: Dispatches credentials, returns Authenticated or Challenge
    Realm: Display name plus RealmConfig
    BasicAuthMiddleware: ASGI stage protecting URL prefixes with realms
    HashChecker / PasswdFile / LdapAuthenticator: verification collaborators

Usage:
    from genro_authgate import AuthGate, CredentialMap, HttpRequest, Realm

    gate = AuthGate()
    realm = Realm("Admin Area", CredentialMap({"username": "admin", "password": "secret"}))

    request = HttpRequest(scope)
    if not gate.authenticate(request, realm):
        await request.response(scope, receive, send)  # 401 challenge
"""

__version__ = "0.1.0"

from .challenge import ChallengeResponder
from .checkers import (
    Checker,
    DirectoryChecker,
    FileChecker,
    HashChecker,
    LdapAuthenticator,
    PasswdFile,
    PasswordChecker,
)
from .config import ConfigError, find_config_file, load_config, load_realm_entries
from .credentials import Credentials, decode_basic_authorization, split_credentials
from .exceptions import (
    AuthGateError,
    CredentialStoreError,
    DirectoryError,
    RealmConfigError,
    ResponseFinalizedError,
)
from .gate import AuthGate
from .middleware import BasicAuthMiddleware
from .outcome import Authenticated, AuthOutcome, Challenge
from .realm import CallbackRealm, CredentialMap, Realm, RealmConfig
from .request import HttpRequest
from .response import Response
from .strategies import (
    CallbackStrategy,
    DirectoryLookup,
    FileLookup,
    InlineCredentials,
    resolve_strategy,
)
from .types import ASGIApp, Message, Receive, Scope, Send

__all__ = [
    # Gate
    "AuthGate",
    "ChallengeResponder",
    "Authenticated",
    "Challenge",
    "AuthOutcome",
    # Realms and strategies
    "Realm",
    "RealmConfig",
    "CallbackRealm",
    "CredentialMap",
    "CallbackStrategy",
    "InlineCredentials",
    "FileLookup",
    "DirectoryLookup",
    "resolve_strategy",
    # Credentials
    "Credentials",
    "decode_basic_authorization",
    "split_credentials",
    # Checkers
    "Checker",
    "HashChecker",
    "PasswordChecker",
    "PasswdFile",
    "FileChecker",
    "LdapAuthenticator",
    "DirectoryChecker",
    # HTTP
    "HttpRequest",
    "Response",
    "BasicAuthMiddleware",
    # Config
    "ConfigError",
    "load_config",
    "load_realm_entries",
    "find_config_file",
    # Exceptions
    "AuthGateError",
    "RealmConfigError",
    "CredentialStoreError",
    "DirectoryError",
    "ResponseFinalizedError",
    # ASGI types
    "ASGIApp",
    "Message",
    "Receive",
    "Scope",
    "Send",
]
