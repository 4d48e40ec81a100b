"""Prober registry for resource-probe.

Maps canonical type keys to prober classes and lazily builds one prober
instance per key, reusing it for every later request. Type names are
normalized first, so ``"AWS::S3::Bucket"``, ``"aws_s3_bucket"`` and
``"s3_bucket"`` all resolve to the same instance.

The set of supported keys is fixed when the registry is constructed:
the built-in probers plus, optionally, probers declared by installed
packages as entry-points.

Example
-------
::

    from resource_probe.config import ClientConfig
    from resource_probe.registry import ProberRegistry

    registry = ProberRegistry(ClientConfig(region="us-east-1"))
    result = registry.probe("AWS::S3::Bucket", "my-bucket")

Declaring an extra prober in a downstream package's ``pyproject.toml``::

    [project.entry-points."resource_probe.probers"]
    aws_sqs_queue = "my_package.probers:SqsQueueProber"

and opting in at runtime::

    registry = ProberRegistry(config, entrypoint_group="resource_probe.probers")
"""
from __future__ import annotations

import importlib.metadata
import logging
import threading

from resource_probe.config import ClientConfig
from resource_probe.context import ProbeContext
from resource_probe.errors import UnsupportedTypeError
from resource_probe.naming import normalize_type_name
from resource_probe.probers import BUILTIN_PROBERS, Prober, ProbeResult

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "resource_probe.probers"


class ProberRegistry:
    """Lazily constructed, memoized probers keyed by canonical type.

    Parameters
    ----------
    config:
        Client configuration handed to every prober the registry builds.
    entrypoint_group:
        If given, entry-points in this group are loaded at construction
        time and added to the supported types. Failures are logged and
        skipped; construction never raises.
    """

    def __init__(self, config: ClientConfig, *, entrypoint_group: str | None = None) -> None:
        self._config = config
        self._factories: dict[str, type[Prober]] = dict(BUILTIN_PROBERS)
        if entrypoint_group is not None:
            self._load_entrypoints(entrypoint_group)
        self._probers: dict[str, Prober] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_prober(self, type_name: str) -> Prober:
        """Return the prober for *type_name*, building it on first use.

        Parameters
        ----------
        type_name:
            Resource type in any supported naming convention.

        Returns
        -------
        Prober
            The same instance for every call with an equivalent type name.

        Raises
        ------
        UnsupportedTypeError
            If the normalized type has no registered prober.
        """
        key = normalize_type_name(type_name)

        prober = self._probers.get(key)
        if prober is not None:
            logger.debug("Reusing %s for %r", type(prober).__name__, key)
            return prober

        factory = self._factories.get(key)
        if factory is None:
            raise UnsupportedTypeError(key, self.supported_types())

        with self._lock:
            # another thread may have built it while we waited
            prober = self._probers.get(key)
            if prober is None:
                prober = factory(self._config)
                self._probers[key] = prober
                logger.debug("Constructed %s for %r", factory.__qualname__, key)
        return prober

    def supported_types(self) -> list[str]:
        """Return every canonical type key this registry can probe, sorted."""
        return sorted(self._factories)

    def probe(
        self,
        type_name: str,
        resource_id: str,
        ctx: ProbeContext | None = None,
    ) -> ProbeResult:
        """Probe a resource by type name and identifier.

        Raises
        ------
        UnsupportedTypeError
            If *type_name* has no registered prober.

        Vendor, malformed-response and cancellation errors from the prober
        propagate unchanged.
        """
        prober = self.get_prober(type_name)
        logger.debug("Probing %s %r", prober.resource_type or type_name, resource_id)
        result = prober.probe(resource_id, ctx)
        logger.debug(
            "Probe of %r (%s) finished: exists=%s", resource_id, type_name, result.exists
        )
        return result

    def __contains__(self, type_name: object) -> bool:
        """Support ``"AWS::S3::Bucket" in registry``; aliases are accepted."""
        if not isinstance(type_name, str):
            return False
        return normalize_type_name(type_name) in self._factories

    def __len__(self) -> int:
        """Return the number of supported types."""
        return len(self._factories)

    def __repr__(self) -> str:
        return (
            f"ProberRegistry(region={self._config.region!r}, "
            f"supported={self.supported_types()}, "
            f"instantiated={sorted(self._probers)})"
        )

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def _load_entrypoints(self, group: str) -> None:
        """Add prober classes declared as package entry-points in *group*.

        The entry-point name is normalized to obtain the type key. Keys
        that are already supported are skipped, so built-in probers cannot
        be shadowed.
        """
        for ep in importlib.metadata.entry_points(group=group):
            key = normalize_type_name(ep.name)
            if key in self._factories:
                logger.debug(
                    "Entry-point %r already supported as %r; skipping.", ep.name, key
                )
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            if not (isinstance(cls, type) and issubclass(cls, Prober)):
                logger.warning(
                    "Entry-point %r loaded %r, which is not a Prober subclass; skipping.",
                    ep.name,
                    cls,
                )
                continue
            self._factories[key] = cls
            logger.debug("Registered prober %r -> %s", key, cls.__qualname__)
