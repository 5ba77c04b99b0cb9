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
Configuration loading for genro-authgate.

Realms are declared in a TOML file, one table per protected route::

    [realms.admin]
    route = "/admin"
    realm = "Admin Area"
    username = "admin"
    password = "$apr1$..."

    [realms.staff]
    route = "/staff"
    realm = "Staff"
    host = "ldap.company.com"
    basedn = "dc=company,dc=com"
    binddn = "cn=svc,ou=People,dc=company,dc=com"
    bindpw = "${LDAP_BINDPW}"

    [realms.partners]
    route = "/partners"
    path = "/etc/app/htpasswd"

Key constraints:
- Keys CANNOT contain underscore (_): all recognized keys are single words,
  so "bind_dn" is reported instead of silently ignored.
- Values support ${VAR} (required) and ${VAR:-default} expansion, which
  keeps bind passwords out of the file.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any

# Python 3.11+ has tomllib in stdlib
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

__all__ = [
    "load_config",
    "load_realm_entries",
    "find_config_file",
    "ConfigError",
    "validate_keys",
]

logger = logging.getLogger("genro_authgate.config")


class ConfigError(Exception):
    """Configuration error."""


def validate_keys(data: Any, path: str = "") -> None:
    """
    Validate that no keys contain underscore.

    Args:
        data: Configuration data (dict, list, or value).
        path: Current path for error messages.

    Raises:
        ConfigError: If a key contains underscore.
    """
    if isinstance(data, dict):
        for key, value in data.items():
            full_path = f"{path}.{key}" if path else key
            if "_" in key:
                raise ConfigError(
                    f"Invalid key '{full_path}': underscore (_) is not allowed in keys. "
                    f"Use single words instead (e.g. 'binddn')."
                )
            validate_keys(value, full_path)
    elif isinstance(data, list):
        for i, item in enumerate(data):
            validate_keys(item, f"{path}[{i}]")


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load configuration from TOML file.

    Args:
        path: Path to TOML configuration file.

    Returns:
        Parsed configuration dict with environment variables expanded.

    Raises:
        ConfigError: If file not found, invalid TOML, keys contain underscore
            or a required environment variable is missing.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse TOML: {e}") from e

    validate_keys(config)
    config = _expand_env_vars(config)
    logger.debug(f"Loaded configuration from {path}")
    return dict(config)


def load_realm_entries(path: str | Path) -> dict[str, dict[str, Any]]:
    """
    Load the [realms.<name>] tables from a configuration file.

    Args:
        path: Path to TOML configuration file.

    Returns:
        Dict of {name: entry} ready for BasicAuthMiddleware(**entries).

    Raises:
        ConfigError: If the file is invalid or a realm entry is not a table.
    """
    realms = load_config(path).get("realms", {})
    if not isinstance(realms, dict):
        raise ConfigError("'realms' must be a table")
    result: dict[str, dict[str, Any]] = {}
    for name, entry in realms.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"Realm entry 'realms.{name}' must be a table")
        result[name] = dict(entry)
    return result


def _expand_env_vars(obj: Any) -> Any:
    """
    Recursively expand environment variables in config values.

    Supports:
    - ${VAR} - required, raises if not set
    - ${VAR:-default} - with default value
    """
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return _expand_string(obj)
    return obj


def _expand_string(s: str) -> str:
    """
    Expand environment variables in a string.

    Raises:
        ConfigError: If required variable is not set.
    """
    pattern = r"\$\{([^}]+)\}"

    def replace(match: re.Match[str]) -> str:
        expr = match.group(1)

        if ":-" in expr:
            var_name, default = expr.split(":-", 1)
            return os.environ.get(var_name, default)
        value = os.environ.get(expr)
        if value is None:
            raise ConfigError(f"Required environment variable not set: {expr}")
        return value

    return re.sub(pattern, replace, s)


def find_config_file() -> Path | None:
    """
    Find configuration file in standard locations.

    Searches:
    1. GENRO_AUTHGATE_CONFIG environment variable
    2. ./authgate.toml
    3. ./config/authgate.toml
    4. ~/.config/genro-authgate/config.toml

    Returns:
        Path to config file or None if not found.
    """
    env_config = os.environ.get("GENRO_AUTHGATE_CONFIG")
    if env_config:
        path = Path(env_config)
        if path.exists():
            return path

    locations = [
        Path.cwd() / "authgate.toml",
        Path.cwd() / "config" / "authgate.toml",
        Path.home() / ".config" / "genro-authgate" / "config.toml",
    ]

    for path in locations:
        if path.exists():
            return path

    return None
