"""Test database configuration loaded from the environment.

Environment Variables Supported:
- ORATEST_USER / ORATEST_PASSWORD: Credentials of the main test schema
- ORATEST_CONNECT_STRING: Easy Connect string, TNS alias or full descriptor
- ORATEST_EXTERNAL_AUTH: Use external authentication (true/false)
- ORATEST_DBA_PRIVILEGE: DBA credentials are available (true/false)
- ORATEST_DBA_USER / ORATEST_DBA_PASSWORD: Credentials used with SYSDBA
- ORATEST_PROXY_SESSION_USER: Proxy user for heterogeneous pool sessions
- ORATEST_CLOUD_SERVICE: The database is an Oracle Cloud service (true/false)
- ORATEST_LOG_LEVEL: Level for the oratestkit loggers
"""

import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Optional, TypedDict

import oracledb
from typing_extensions import NotRequired

from oratestkit.exceptions import ImproperConfigurationError, PrivilegeRequiredError
from oratestkit.utils.logging import get_logger

if TYPE_CHECKING:
    from oracledb import AuthMode

__all__ = ("OracleConnectionParams", "OracleTestConfig", "load_config_from_env")

logger = get_logger("config")

ENV_PREFIX = "ORATEST_"


class OracleConnectionParams(TypedDict, total=False):
    """Keyword arguments accepted by ``oracledb.connect``."""

    dsn: NotRequired[str]
    user: NotRequired[str]
    password: NotRequired[str]
    externalauth: NotRequired[bool]
    mode: NotRequired["AuthMode"]


@dataclass(frozen=True)
class OracleTestConfig:
    """Connection settings and feature flags for the test database."""

    user: Optional[str] = None
    password: Optional[str] = None
    connect_string: Optional[str] = None
    external_auth: bool = False
    dba_privilege: bool = False
    dba_user: Optional[str] = None
    dba_password: Optional[str] = None
    proxy_session_user: Optional[str] = None
    is_cloud_service: bool = False
    log_level: str = "INFO"

    def validate(self) -> "list[str]":
        """Check the settings for completeness.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []
        if not self.connect_string:
            errors.append("connect_string is required")
        if not self.external_auth:
            if not self.user:
                errors.append("user is required unless external authentication is enabled")
            if not self.password:
                errors.append("password is required unless external authentication is enabled")
        if self.dba_privilege and not (self.dba_user and self.dba_password):
            errors.append("dba_user and dba_password are required when dba_privilege is enabled")
        return errors

    def connection_params(self, **overrides: Any) -> OracleConnectionParams:
        """Build ``oracledb.connect`` arguments for the main test schema.

        Args:
            **overrides: Extra keyword arguments merged over the result.

        Raises:
            ImproperConfigurationError: If the configuration is incomplete.

        Returns:
            Connection keyword arguments.
        """
        errors = self.validate()
        if errors:
            raise ImproperConfigurationError(detail="; ".join(errors))
        params: OracleConnectionParams = {"dsn": self.connect_string}  # type: ignore[typeddict-item]
        if self.external_auth:
            params["externalauth"] = True
        else:
            params["user"] = self.user  # type: ignore[typeddict-item]
            params["password"] = self.password  # type: ignore[typeddict-item]
        params.update(overrides)  # type: ignore[typeddict-item]
        return params

    def dba_connection_params(self, operation: Optional[str] = None) -> OracleConnectionParams:
        """Build ``oracledb.connect`` arguments for a SYSDBA session.

        Args:
            operation: Description of the privileged work, used in the error message.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
            ImproperConfigurationError: If the DBA credentials are missing.

        Returns:
            Connection keyword arguments.
        """
        if not self.dba_privilege:
            raise PrivilegeRequiredError(operation)
        if not (self.dba_user and self.dba_password and self.connect_string):
            msg = "dba_user, dba_password and connect_string are required for SYSDBA connections"
            raise ImproperConfigurationError(msg)
        return {
            "user": self.dba_user,
            "password": self.dba_password,
            "dsn": self.connect_string,
            "mode": oracledb.AUTH_MODE_SYSDBA,
        }

    def replace(self, **changes: Any) -> "OracleTestConfig":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)


def load_config_from_env(prefix: str = ENV_PREFIX) -> OracleTestConfig:
    """Load the test configuration from environment variables.

    Args:
        prefix: Prefix shared by all variable names.

    Returns:
        OracleTestConfig built from the environment.
    """
    config = OracleTestConfig(
        user=os.getenv(f"{prefix}USER"),
        password=os.getenv(f"{prefix}PASSWORD"),
        connect_string=os.getenv(f"{prefix}CONNECT_STRING"),
        external_auth=_env_bool(f"{prefix}EXTERNAL_AUTH", False),
        dba_privilege=_env_bool(f"{prefix}DBA_PRIVILEGE", False),
        dba_user=os.getenv(f"{prefix}DBA_USER"),
        dba_password=os.getenv(f"{prefix}DBA_PASSWORD"),
        proxy_session_user=os.getenv(f"{prefix}PROXY_SESSION_USER"),
        is_cloud_service=_env_bool(f"{prefix}CLOUD_SERVICE", False),
        log_level=os.getenv(f"{prefix}LOG_LEVEL", "INFO").upper(),
    )
    for error in config.validate():
        logger.warning("Incomplete test configuration: %s", error)
    return config


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on", "enabled")
