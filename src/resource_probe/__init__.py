"""resource-probe: check whether AWS resources exist and collect their metadata.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import resource_probe

    # Fold any naming convention onto the canonical key
    resource_probe.normalize_type_name("AWS::S3::Bucket")   # 'aws_s3_bucket'

    # Kinds with a built-in prober
    resource_probe.supported_types()

    # Probe a single resource using configuration from the environment
    result = resource_probe.probe("s3_bucket", "my-bucket", timeout=10)
    if result.exists:
        print(result.arn, result.tags)

    resource_probe.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from resource_probe.config import ClientConfig
    from resource_probe.probers.base import ProbeResult


def normalize_type_name(type_name: str) -> str:
    """Return the canonical type key for *type_name*.

    Parameters
    ----------
    type_name:
        A Terraform, CloudFormation or short-form resource type.

    Returns
    -------
    str
        The canonical key, or *type_name* unchanged if it is not recognized.
    """
    from resource_probe.naming import normalize_type_name as _normalize

    return _normalize(type_name)


def supported_types() -> list[str]:
    """Return the canonical keys of every built-in prober, sorted."""
    from resource_probe.probers import BUILTIN_PROBERS

    return sorted(BUILTIN_PROBERS)


def probe(
    type_name: str,
    resource_id: str,
    config: "ClientConfig | None" = None,
    timeout: float | None = None,
) -> "ProbeResult":
    """Probe one resource with a throwaway registry.

    Long-lived callers should keep a ``ProberRegistry`` instead, so that
    probers and their clients are reused.

    Parameters
    ----------
    type_name:
        Resource type in any supported naming convention.
    resource_id:
        The service-specific identifier, e.g. a bucket name.
    config:
        Client configuration. Defaults to ``ClientConfig.from_env()``.
    timeout:
        Optional overall deadline in seconds.

    Returns
    -------
    ProbeResult
        The probe outcome.

    Raises
    ------
    resource_probe.errors.UnsupportedTypeError
        If *type_name* has no prober.
    resource_probe.errors.ProbeCancelledError
        If *timeout* elapses first.
    """
    from resource_probe.config import ClientConfig
    from resource_probe.context import ProbeContext
    from resource_probe.registry import ProberRegistry

    registry = ProberRegistry(config if config is not None else ClientConfig.from_env())
    ctx = ProbeContext.with_timeout(timeout) if timeout is not None else None
    return registry.probe(type_name, resource_id, ctx)


__all__ = [
    "__version__",
    "normalize_type_name",
    "probe",
    "supported_types",
]
