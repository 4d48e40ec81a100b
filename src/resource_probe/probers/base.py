"""Prober contract and probe result type.

A prober checks whether one kind of AWS resource exists and, if so,
collects its ARN, tags and provider-reported properties. Every kind gets
its own ``Prober`` subclass; the registry picks the right one by
canonical type key.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from botocore.client import BaseClient

from resource_probe.config import ClientConfig
from resource_probe.context import ProbeContext
from resource_probe.errors import MalformedResponseError


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single probe.

    Parameters
    ----------
    exists:
        Whether the resource exists.
    arn:
        The resource's ARN; empty when it does not exist.
    tags:
        Tag key to value mapping; empty when none are set.
    properties:
        Provider-reported attributes; empty when the resource does not exist.

    Raises
    ------
    ValueError
        If a not-found result carries an ARN, tags or properties.
    """

    exists: bool
    arn: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    properties: dict[str, Any] = field(default_factory=dict)

    # dict fields make instances unhashable
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not self.exists and (self.arn or self.tags or self.properties):
            raise ValueError("A not-found ProbeResult must not carry arn, tags or properties")

    @classmethod
    def not_found(cls) -> "ProbeResult":
        """Return the result for a resource confirmed absent."""
        return cls(exists=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the outward shape; absent resources report null arn/properties."""
        return {
            "exists": self.exists,
            "arn": self.arn if self.exists else None,
            "tags": dict(self.tags),
            "properties": dict(self.properties) if self.exists else None,
        }


class Prober(ABC):
    """Existence check for one resource kind.

    Subclasses set ``resource_type`` to the canonical key they serve and
    ``service_name`` to the boto3 service they call, and implement
    ``probe``.

    Parameters
    ----------
    config:
        Shared client configuration.
    client:
        Pre-built boto3 client. When omitted one is created from *config*.
    """

    resource_type: ClassVar[str] = ""
    service_name: ClassVar[str] = ""

    def __init__(self, config: ClientConfig, client: BaseClient | None = None) -> None:
        self._config = config
        self._client = client if client is not None else config.client(self.service_name)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def client(self) -> BaseClient:
        return self._client

    @abstractmethod
    def probe(self, resource_id: str, ctx: ProbeContext | None = None) -> ProbeResult:
        """Check whether the resource identified by *resource_id* exists.

        Parameters
        ----------
        resource_id:
            The service-specific identifier, e.g. a bucket or table name.
        ctx:
            Cancellation and deadline context. Defaults to a background
            context with no deadline.

        Returns
        -------
        ProbeResult
            ``ProbeResult.not_found()`` when AWS confirms the resource is
            absent; a populated result otherwise.

        Raises
        ------
        botocore.exceptions.ClientError
            For any AWS error other than not-found, unchanged.
        MalformedResponseError
            If AWS answers with a shape the prober cannot interpret.
        ProbeCancelledError
            If *ctx* is cancelled or its deadline passes.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(resource_type={self.resource_type!r}, region={self._config.region!r})"


def tags_from_tag_list(tag_list: Iterable[Mapping[str, Any]], operation: str) -> dict[str, str]:
    """Convert the AWS ``[{"Key": ..., "Value": ...}]`` shape into a dict.

    Raises
    ------
    MalformedResponseError
        If an entry is not a mapping or has no ``Key``.
    """
    tags: dict[str, str] = {}
    for entry in tag_list:
        if not isinstance(entry, Mapping) or "Key" not in entry:
            raise MalformedResponseError(operation, f"tag entry without a Key: {entry!r}")
        tags[str(entry["Key"])] = str(entry.get("Value", ""))
    return tags
