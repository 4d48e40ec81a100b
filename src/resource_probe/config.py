"""AWS client configuration for resource-probe.

``ClientConfig`` is the one piece of input the core takes from its host:
region, optional explicit credentials, and an optional custom endpoint
for emulators such as LocalStack. Probers build their boto3 clients from
it and nothing else.

Configuration can be assembled from a dict, a YAML file, or the process
environment::

    config = ClientConfig.from_env().merged(region="eu-west-1")

A YAML file looks like::

    region: us-east-1
    profile: sandbox
    localstack: true
    read_timeout: 10
"""
from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import boto3
import yaml
from botocore.client import BaseClient
from botocore.config import Config

from resource_probe.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
LOCALSTACK_ENDPOINT = "http://localhost:4566"

# LocalStack accepts any credentials; these are its documented defaults.
_LOCALSTACK_ACCESS_KEY = "test"
_LOCALSTACK_SECRET_KEY = "test"

_TRUTHY = frozenset({"1", "true", "yes", "on"})

_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "region": (str,),
    "profile": (str,),
    "access_key_id": (str,),
    "secret_access_key": (str,),
    "session_token": (str,),
    "endpoint_url": (str,),
    "localstack": (bool,),
    "connect_timeout": (int, float),
    "read_timeout": (int, float),
}


@dataclass(frozen=True)
class ClientConfig:
    """Resolved AWS API client configuration.

    Parameters
    ----------
    region:
        AWS region used for every client.
    profile:
        Named profile from the shared AWS config files.
    access_key_id, secret_access_key, session_token:
        Explicit credentials. When omitted, boto3's default credential
        chain applies.
    endpoint_url:
        Custom endpoint for all services, e.g. an emulator.
    localstack:
        Target a LocalStack instance on ``localhost:4566`` with its
        default credentials unless overridden.
    connect_timeout, read_timeout:
        Socket timeouts in seconds for every AWS call.
    """

    region: str = DEFAULT_REGION
    profile: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    endpoint_url: str | None = None
    localstack: bool = False
    connect_timeout: float = 10.0
    read_timeout: float = 30.0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClientConfig":
        """Build a config from a plain mapping.

        ``None`` values are ignored so that blank YAML keys fall back to
        the defaults.

        Raises
        ------
        ConfigError
            If *data* holds unknown keys or values of the wrong type.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        unknown = sorted(set(data) - set(_FIELD_TYPES))
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            expected = _FIELD_TYPES[key]
            # bool is an int subclass; reject it for the numeric fields
            if not isinstance(value, expected) or (
                isinstance(value, bool) and bool not in expected
            ):
                names = " or ".join(t.__name__ for t in expected)
                raise ConfigError(
                    f"Configuration key {key!r} must be {names}, "
                    f"got {type(value).__name__}"
                )
            values[key] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ClientConfig":
        """Load a config from a YAML file containing a single mapping.

        Raises
        ------
        ConfigError
            If the file cannot be read, is not valid YAML, or does not
            describe a valid configuration.
        """
        return cls.from_mapping(_read_yaml(path))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Build a config from environment variables.

        Reads ``AWS_REGION`` (falling back to ``AWS_DEFAULT_REGION``),
        ``AWS_PROFILE``, ``AWS_ENDPOINT_URL`` and
        ``RESOURCE_PROBE_LOCALSTACK``. Credentials are left to boto3.
        """
        env = os.environ if environ is None else environ
        region = env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or DEFAULT_REGION
        return cls(
            region=region,
            profile=env.get("AWS_PROFILE") or None,
            endpoint_url=env.get("AWS_ENDPOINT_URL") or None,
            localstack=env.get("RESOURCE_PROBE_LOCALSTACK", "").strip().lower() in _TRUTHY,
        )

    def merged(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    def merged_with_yaml(self, path: str | Path) -> "ClientConfig":
        """Return a copy overridden by the keys present in a YAML file.

        Keys absent from the file keep their current values.

        Raises
        ------
        ConfigError
            As for ``from_yaml``.
        """
        data = _read_yaml(path)
        self.from_mapping(data)
        return self.merged(**data)

    # ------------------------------------------------------------------
    # Client factory
    # ------------------------------------------------------------------

    def effective_endpoint(self) -> str | None:
        """Return the endpoint clients should use, or ``None`` for AWS itself."""
        if self.endpoint_url:
            return self.endpoint_url
        if self.localstack:
            return LOCALSTACK_ENDPOINT
        return None

    def session(self) -> boto3.session.Session:
        """Return a new boto3 session for this configuration.

        Sessions are not thread-safe, so each call builds a fresh one.
        """
        access_key = self.access_key_id
        secret_key = self.secret_access_key
        if self.localstack and not (access_key or secret_key or self.profile):
            access_key = _LOCALSTACK_ACCESS_KEY
            secret_key = _LOCALSTACK_SECRET_KEY
        return boto3.session.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=self.session_token,
            region_name=self.region,
            profile_name=self.profile,
        )

    def client(self, service_name: str) -> BaseClient:
        """Return a boto3 client for *service_name*.

        Clients make a single attempt per call. Path-style S3 addressing
        is used whenever a custom endpoint is in effect.
        """
        endpoint = self.effective_endpoint()
        options: dict[str, Any] = {
            "connect_timeout": self.connect_timeout,
            "read_timeout": self.read_timeout,
            "retries": {"total_max_attempts": 1, "mode": "standard"},
        }
        if endpoint is not None:
            options["s3"] = {"addressing_style": "path"}
        logger.debug(
            "Creating %s client (region=%s, endpoint=%s)",
            service_name,
            self.region,
            endpoint or "default",
        )
        return self.session().client(
            service_name,
            endpoint_url=endpoint,
            config=Config(**options),
        )

    def __repr__(self) -> str:
        secret = "***" if self.secret_access_key else None
        return (
            f"ClientConfig(region={self.region!r}, profile={self.profile!r}, "
            f"endpoint_url={self.effective_endpoint()!r}, localstack={self.localstack}, "
            f"access_key_id={self.access_key_id!r}, secret_access_key={secret!r})"
        )


def _read_yaml(path: str | Path) -> Any:
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {file_path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {file_path}: {exc}") from exc
    logger.debug("Loaded client configuration from %s", file_path)
    return {} if data is None else data
