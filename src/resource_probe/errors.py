"""Error types and the not-found classifier for resource-probe.

A confirmed "resource does not exist" answer from AWS is *not* an error:
probers turn it into ``ProbeResult.not_found()``. Everything defined here
describes the remaining failure modes, and ``is_not_found_error`` is the
single place where vendor errors are classified as absence.

Vendor errors (botocore ``ClientError`` and ``BotoCoreError``) are never
wrapped. They reach the caller with their original detail intact.
"""
from __future__ import annotations

from botocore.exceptions import ClientError

NOT_FOUND_CODES: frozenset[str] = frozenset(
    {
        "404",
        "NotFound",
        "NoSuchBucket",
        "ResourceNotFoundException",
        "TableNotFoundException",
    }
)

# Substrings checked when no structured error code is available.
_NOT_FOUND_MARKERS: tuple[str, ...] = (
    "404",
    "NotFound",
    "NoSuchBucket",
    "ResourceNotFoundException",
)

NO_TAGS_CODES: frozenset[str] = frozenset({"NoSuchTagSet", "NoSuchTagSetError"})


class ProbeError(Exception):
    """Base class for every error raised by resource-probe itself."""


class UnsupportedTypeError(ProbeError, LookupError):
    """Raised when a normalized type key has no registered prober."""

    def __init__(self, type_name: str, supported: list[str] | None = None) -> None:
        self.type_name = type_name
        self.supported = sorted(supported or [])
        available = ", ".join(self.supported) if self.supported else "none"
        super().__init__(
            f"Resource type {type_name!r} is not supported. "
            f"Supported types: {available}."
        )


class MalformedResponseError(ProbeError):
    """Raised when AWS answers successfully with a shape we cannot interpret."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Malformed {operation} response: {detail}")


class ProbeCancelledError(ProbeError):
    """Raised when a probe is cancelled or runs past its deadline."""

    def __init__(self, reason: str = "cancelled") -> None:
        self.reason = reason
        super().__init__(f"Probe aborted: {reason}")


class ConfigError(ProbeError, ValueError):
    """Raised for invalid client configuration input."""


def _client_error_details(err: ClientError) -> tuple[str, int | None]:
    response = err.response or {}
    code = str(response.get("Error", {}).get("Code", ""))
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code, status


def is_not_found_error(err: BaseException | str | None) -> bool:
    """Return True if *err* means the probed resource does not exist.

    botocore ``ClientError`` instances are judged on their structured error
    code and HTTP status only. Anything else is judged on its string form.
    The check is deliberately narrow: access-denied, throttling, timeouts
    and other 4xx/5xx failures all return False.

    Parameters
    ----------
    err:
        An exception, an error message, or ``None``.

    Returns
    -------
    bool
        True when the error carries a not-found marker.
    """
    if err is None:
        return False
    if isinstance(err, ClientError):
        code, status = _client_error_details(err)
        return code in NOT_FOUND_CODES or status == 404
    text = err if isinstance(err, str) else str(err)
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def is_no_tags_error(err: BaseException | None) -> bool:
    """Return True if *err* is the S3 "no tag set configured" answer."""
    if not isinstance(err, ClientError):
        return False
    code, _ = _client_error_details(err)
    return code in NO_TAGS_CODES


__all__ = [
    "NOT_FOUND_CODES",
    "NO_TAGS_CODES",
    "ConfigError",
    "MalformedResponseError",
    "ProbeCancelledError",
    "ProbeError",
    "UnsupportedTypeError",
    "is_no_tags_error",
    "is_not_found_error",
]
