"""Integration tests.

These tests talk to a LocalStack emulator on ``localhost:4566`` and skip
themselves when it is not reachable. Run only the unit tests with
``pytest tests/unit/`` or deselect these with ``-m "not integration"``.
"""
from __future__ import annotations
