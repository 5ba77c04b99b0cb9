# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for realm definitions and strategy resolution."""

import pytest

from genro_authgate.exceptions import RealmConfigError
from genro_authgate.realm import CallbackRealm, CredentialMap, Realm
from genro_authgate.strategies import (
    CallbackStrategy,
    DirectoryLookup,
    FileLookup,
    InlineCredentials,
    resolve_strategy,
)


class TestRealm:
    """Tests for Realm and RealmConfig variants."""

    def test_callback_requires_callable(self) -> None:
        """CallbackRealm rejects non-callables at construction."""
        with pytest.raises(RealmConfigError):
            CallbackRealm("not callable")  # type: ignore[arg-type]

    def test_credential_map_requires_mapping(self) -> None:
        """CredentialMap rejects non-mappings."""
        with pytest.raises(RealmConfigError):
            CredentialMap(["username", "password"])  # type: ignore[arg-type]

    def test_credential_map_is_read_only(self) -> None:
        """CredentialMap copies the mapping and exposes it read-only."""
        source = {"username": "admin", "password": "secret"}
        config = CredentialMap(source)
        source["password"] = "changed"

        assert config.get("password") == "secret"
        with pytest.raises(TypeError):
            config.entries["password"] = "other"  # type: ignore[index]

    def test_realm_name_must_be_string(self) -> None:
        """Realm name must be a string."""
        with pytest.raises(RealmConfigError):
            Realm(42, CredentialMap({}))  # type: ignore[arg-type]

    def test_realm_config_must_be_variant(self) -> None:
        """Plain dicts are not accepted as realm config."""
        with pytest.raises(RealmConfigError):
            Realm("Area", {"username": "admin"})  # type: ignore[arg-type]

    def test_realm_is_frozen(self) -> None:
        """Realm cannot be modified after construction."""
        realm = Realm("Area", CredentialMap({}))
        with pytest.raises(AttributeError):
            realm.name = "Other"  # type: ignore[misc]

    def test_from_options(self) -> None:
        """Single-mapping form takes the name from the realm key."""
        realm = Realm.from_options({"realm": "Admin Area", "username": "admin", "password": "pw"})

        assert realm.name == "Admin Area"
        assert isinstance(realm.config, CredentialMap)
        assert "realm" not in realm.config
        assert realm.config.get("username") == "admin"

    def test_from_options_default_name(self) -> None:
        """Missing realm key falls back to the default name."""
        realm = Realm.from_options({"path": "/etc/htpasswd"}, default_name="partners")
        assert realm.name == "partners"

    def test_unknown_keys(self) -> None:
        """Unknown keys are reported, recognized keys are not."""
        config = CredentialMap({"host": "ldap", "bind_dn": "x", "colour": "red"})
        assert config.unknown_keys == ["bind_dn", "colour"]

    def test_realm_name_with_spaces(self) -> None:
        """Realm names may contain whitespace."""
        assert Realm("My Protected Area", CredentialMap({})).name == "My Protected Area"

    def test_realm_name_latin1(self) -> None:
        """Latin-1 names are accepted, others are rejected at construction."""
        assert Realm("\xc1rea Riservata", CredentialMap({})).name == "\xc1rea Riservata"
        with pytest.raises(RealmConfigError):
            Realm("管理", CredentialMap({}))
        with pytest.raises(RealmConfigError):
            Realm.from_options({"realm": "管理", "username": "a", "password": "b"})


class TestResolveStrategy:
    """Tests for resolve_strategy() priority ordering."""

    def test_callback(self) -> None:
        """CallbackRealm resolves to CallbackStrategy."""

        def check(username: str, password: str) -> bool:
            return True

        strategy = resolve_strategy(CallbackRealm(check))
        assert isinstance(strategy, CallbackStrategy)
        assert strategy.fn is check
        assert strategy.kind == "callback"

    def test_inline_credentials(self) -> None:
        """username + password resolve to InlineCredentials."""
        strategy = resolve_strategy(CredentialMap({"username": "admin", "password": "secret"}))
        assert strategy == InlineCredentials("admin", "secret")
        assert strategy.kind == "inline"

    def test_inline_requires_both_values(self) -> None:
        """Empty username or password does not select InlineCredentials."""
        assert resolve_strategy(CredentialMap({"username": "admin", "password": ""})) is None
        assert resolve_strategy(CredentialMap({"username": "", "password": "secret"})) is None
        assert resolve_strategy(CredentialMap({"password": "secret"})) is None

    def test_file_lookup(self) -> None:
        """path resolves to FileLookup."""
        strategy = resolve_strategy(CredentialMap({"path": "/etc/htpasswd"}))
        assert isinstance(strategy, FileLookup)
        assert strategy.path == "/etc/htpasswd"
        assert strategy.options == {}

    def test_file_lookup_options(self) -> None:
        """encoding is passed as an adapter option."""
        strategy = resolve_strategy(CredentialMap({"path": "/etc/htpasswd", "encoding": "latin-1"}))
        assert isinstance(strategy, FileLookup)
        assert strategy.options == {"encoding": "latin-1"}

    def test_directory_lookup_defaults(self) -> None:
        """host resolves to DirectoryLookup with default filter and scope."""
        strategy = resolve_strategy(
            CredentialMap({"host": "ldap.company.com", "basedn": "ou=People,dc=company,dc=com"})
        )
        assert isinstance(strategy, DirectoryLookup)
        assert strategy.host == "ldap.company.com"
        assert strategy.basedn == "ou=People,dc=company,dc=com"
        assert strategy.binddn is None
        assert strategy.bindpw is None
        assert strategy.filter == "(uid=%s)"
        assert strategy.scope == "sub"
        assert strategy.port is None
        assert strategy.kind == "directory"

    def test_directory_lookup_authenticated_bind(self) -> None:
        """Active Directory style config keeps bind parameters."""
        strategy = resolve_strategy(
            CredentialMap(
                {
                    "host": "ad.company.com",
                    "basedn": "dc=company,dc=com",
                    "binddn": "cn=svc,ou=People,dc=company,dc=com",
                    "bindpw": "secret",
                    "filter": "(sAMAccountName=%s)",
                    "port": "636",
                    "timeout": 5,
                }
            )
        )
        assert isinstance(strategy, DirectoryLookup)
        assert strategy.binddn == "cn=svc,ou=People,dc=company,dc=com"
        assert strategy.bindpw == "secret"
        assert strategy.filter == "(sAMAccountName=%s)"
        assert strategy.port == 636
        assert strategy.timeout == 5.0

    def test_directory_options(self) -> None:
        """as_options() returns authenticator keyword arguments."""
        strategy = resolve_strategy(CredentialMap({"host": "ldap", "basedn": "dc=x"}))
        assert isinstance(strategy, DirectoryLookup)
        options = strategy.as_options()
        assert options["host"] == "ldap"
        assert options["basedn"] == "dc=x"
        assert options["filter"] == "(uid=%s)"

    def test_inline_wins_over_host(self) -> None:
        """username/password take priority over host."""
        strategy = resolve_strategy(
            CredentialMap({"username": "admin", "password": "secret", "host": "ldap.company.com"})
        )
        assert isinstance(strategy, InlineCredentials)

    def test_inline_wins_over_path(self) -> None:
        """username/password take priority over path."""
        strategy = resolve_strategy(
            CredentialMap({"username": "admin", "password": "secret", "path": "/etc/htpasswd"})
        )
        assert isinstance(strategy, InlineCredentials)

    def test_path_wins_over_host(self) -> None:
        """path takes priority over host."""
        strategy = resolve_strategy(CredentialMap({"path": "/etc/htpasswd", "host": "ldap"}))
        assert isinstance(strategy, FileLookup)

    def test_no_strategy(self) -> None:
        """Maps matching no rule resolve to None."""
        assert resolve_strategy(CredentialMap({})) is None
        assert resolve_strategy(CredentialMap({"basedn": "dc=x"})) is None

    def test_repr_hides_secrets(self) -> None:
        """Passwords never appear in strategy reprs."""
        assert "secret" not in repr(InlineCredentials("admin", "secret"))
        assert "secret" not in repr(DirectoryLookup(host="ldap", bindpw="secret"))

    @pytest.mark.parametrize(
        "options",
        [
            {"port": "ldaps"},
            {"port": "389a"},
            {"timeout": "soon"},
        ],
        ids=["port-name", "port-suffix", "timeout-text"],
    )
    def test_directory_bad_numbers(self, options: dict) -> None:
        """Non-numeric port or timeout resolve to None."""
        config = CredentialMap({"host": "ldap", "basedn": "dc=x", **options})
        assert resolve_strategy(config) is None
