"""CLI package.

The ``cli`` sub-package contains the Click application and its command
implementations. The entry point is ``resource_probe.cli.main:cli``.
"""
from __future__ import annotations
