"""
Pydantic configuration model for the Route 53 client.

The model is frozen: the ``with_*`` helpers return an updated copy
instead of mutating the instance, so a config handed to one client
can never change underneath it.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from r53simple.base.exceptions import ConfigurationError

DEFAULT_BASE_URL = "amazonaws.com"
DEFAULT_SERVICE = "route53"
DEFAULT_REGION = "us-east-1"
DEFAULT_SIGNATURE_METHOD = "HmacSHA256"
DEFAULT_SIGNATURE_VERSION = 2
DEFAULT_VERSION = "2013-04-01"
DEFAULT_NTP_SERVER = "pool.ntp.org"

SignatureMethod = Literal["HmacSHA256", "HmacSHA1"]


class ResponseFormat(str, Enum):
    """How :meth:`Route53Client.send` hands back a response body."""

    OBJECT = "object"
    JSON = "json"
    RAW = "raw"
    XML = "xml"

    @classmethod
    def parse(cls, value: ResponseFormat | str | None) -> ResponseFormat:
        """Resolve a format name case-insensitively.

        ``perl`` is accepted as an alias of ``object``.

        Raises:
            ConfigurationError: If *value* is empty or unknown.
        """
        if isinstance(value, cls):
            return value
        if not value:
            raise ConfigurationError("response format is required")
        name = value.strip().lower()
        if name == "perl":
            return cls.OBJECT
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(f"unknown response format: {value}") from None


class ClientConfig(BaseModel):
    """Configuration for the Route 53 client.

    Credentials are resolved in order:
    1. Explicit values passed to the model.
    2. Environment variables ``AWS_ACCESS_KEY`` / ``AWS_SECRET_KEY``.
    3. Environment variables ``AWS_ACCESS_KEY_ID`` / ``AWS_SECRET_ACCESS_KEY``.

    Missing credentials are not an error here; they are reported by the
    request builder before anything is sent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    access_key: str | None = Field(default=None, description="AWS access key ID")
    secret_key: str | None = Field(default=None, description="AWS secret access key")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base host")
    service: str = Field(default=DEFAULT_SERVICE, description="Service host label")
    region: str = Field(default=DEFAULT_REGION, description="AWS region")
    signature_method: SignatureMethod = DEFAULT_SIGNATURE_METHOD
    signature_version: int = DEFAULT_SIGNATURE_VERSION
    version: str = Field(default=DEFAULT_VERSION, description="API version")
    response_format: str | None = Field(
        default=ResponseFormat.RAW.value,
        description="object | json | raw | xml",
    )
    use_ntp: bool = Field(default=False, description="Take the request time from NTP")
    ntp_server: str = DEFAULT_NTP_SERVER
    content: str | None = Field(default=None, description="Staged request body")
    debug: bool = False

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "access_key": ("AWS_ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
            "secret_key": ("AWS_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"),
        }
        for field, env_vars in env_map.items():
            if values.get(field) is None:
                for env_var in env_vars:
                    if os.environ.get(env_var):
                        values[field] = os.environ[env_var]
                        break
        return values

    # --- Derived values ---

    @property
    def host(self) -> str:
        return f"{self.service}.{self.base_url}"

    @property
    def endpoint(self) -> str:
        return f"https://{self.host}"

    @property
    def namespace(self) -> str:
        """XML namespace of request documents for the configured API version."""
        return f"{self.endpoint}/doc/{self.version}/"

    # --- Checks performed before a request is sent ---

    def require_credentials(self) -> None:
        """Raise :class:`ConfigurationError` unless both keys are set."""
        for field in ("access_key", "secret_key"):
            if not getattr(self, field):
                raise ConfigurationError(f"{field} is required")

    def require_response_format(self) -> ResponseFormat:
        return ResponseFormat.parse(self.response_format)

    # --- Builders ---

    def _with(self, **updates: Any) -> ClientConfig:
        return self.model_copy(update=updates)

    def with_access_key(self, access_key: str) -> ClientConfig:
        return self._with(access_key=access_key)

    def with_secret_key(self, secret_key: str) -> ClientConfig:
        return self._with(secret_key=secret_key)

    def with_response_format(self, response_format: ResponseFormat | str) -> ClientConfig:
        if isinstance(response_format, ResponseFormat):
            response_format = response_format.value
        return self._with(response_format=response_format)

    def with_signature_method(self, method: SignatureMethod) -> ClientConfig:
        if method not in ("HmacSHA256", "HmacSHA1"):
            raise ConfigurationError(f"unknown signature method: {method}")
        return self._with(signature_method=method)

    def with_signature_version(self, version: int) -> ClientConfig:
        return self._with(signature_version=version)

    def with_version(self, version: str) -> ClientConfig:
        return self._with(version=version)

    def with_service(self, service: str) -> ClientConfig:
        return self._with(service=service)

    def with_base_url(self, base_url: str) -> ClientConfig:
        return self._with(base_url=base_url)

    def with_ntp(self, use_ntp: bool = True, server: str | None = None) -> ClientConfig:
        return self._with(use_ntp=use_ntp, ntp_server=server or self.ntp_server)

    def with_content(self, content: str | None) -> ClientConfig:
        return self._with(content=content)

    def with_debug(self, debug: bool = True) -> ClientConfig:
        return self._with(debug=debug)


__all__ = [
    "ClientConfig",
    "ResponseFormat",
    "SignatureMethod",
    "DEFAULT_BASE_URL",
    "DEFAULT_NTP_SERVER",
    "DEFAULT_SERVICE",
    "DEFAULT_VERSION",
]
