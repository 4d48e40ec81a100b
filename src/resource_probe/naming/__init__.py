"""Type-name normalization for resource-probe."""
from __future__ import annotations

from resource_probe.naming.normalizer import ALIASES, aliases_for, normalize_type_name

__all__ = ["ALIASES", "aliases_for", "normalize_type_name"]
