"""Per-kind probers and the shared probe contract.

Built-in probers
----------------
- ``aws_s3_bucket``       -> :class:`S3BucketProber`
- ``aws_dynamodb_table``  -> :class:`DynamoDBTableProber`

Additional probers can be shipped by other packages and discovered by the
registry through the "resource_probe.probers" entry-point group.
"""
from __future__ import annotations

from resource_probe.probers.base import Prober, ProbeResult, tags_from_tag_list
from resource_probe.probers.dynamodb import DynamoDBTableProber
from resource_probe.probers.s3 import S3BucketProber, bucket_arn

BUILTIN_PROBERS: dict[str, type[Prober]] = {
    DynamoDBTableProber.resource_type: DynamoDBTableProber,
    S3BucketProber.resource_type: S3BucketProber,
}

__all__ = [
    "BUILTIN_PROBERS",
    "DynamoDBTableProber",
    "Prober",
    "ProbeResult",
    "S3BucketProber",
    "bucket_arn",
    "tags_from_tag_list",
]
