"""Prober registry: type-name lookup with lazily built, reused probers."""
from __future__ import annotations

from resource_probe.registry.registry import ENTRYPOINT_GROUP, ProberRegistry

__all__ = ["ENTRYPOINT_GROUP", "ProberRegistry"]
