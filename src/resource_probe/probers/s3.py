"""S3 bucket prober.

Existence is checked with ``HeadBucket``; tags come from
``GetBucketTagging``. Bucket ARNs carry neither region nor account, so
the ARN is built locally from the bucket name.
"""
from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from resource_probe.context import ProbeContext
from resource_probe.errors import MalformedResponseError, is_no_tags_error, is_not_found_error
from resource_probe.probers.base import Prober, ProbeResult, tags_from_tag_list

logger = logging.getLogger(__name__)

S3_ARN_PREFIX = "arn:aws:s3:::"

_REGION_HEADER = "x-amz-bucket-region"


def bucket_arn(bucket_name: str) -> str:
    """Return the ARN of the bucket called *bucket_name*."""
    return f"{S3_ARN_PREFIX}{bucket_name}"


class S3BucketProber(Prober):
    """Probe for ``aws_s3_bucket`` resources."""

    resource_type = "aws_s3_bucket"
    service_name = "s3"

    def probe(self, resource_id: str, ctx: ProbeContext | None = None) -> ProbeResult:
        ctx = ctx or ProbeContext.background()

        try:
            head = ctx.call(self._client.head_bucket, Bucket=resource_id)
        except ClientError as exc:
            if is_not_found_error(exc):
                logger.debug("Bucket %r not found: %s", resource_id, exc)
                return ProbeResult.not_found()
            raise

        tags = self._fetch_tags(resource_id, ctx)
        properties: dict[str, Any] = {
            "BucketName": resource_id,
            "Tags": dict(tags),
        }
        region = _bucket_region(head)
        if region:
            properties["Region"] = region

        return ProbeResult(
            exists=True,
            arn=bucket_arn(resource_id),
            tags=tags,
            properties=properties,
        )

    def _fetch_tags(self, bucket_name: str, ctx: ProbeContext) -> dict[str, str]:
        try:
            response = ctx.call(self._client.get_bucket_tagging, Bucket=bucket_name)
        except ClientError as exc:
            if is_no_tags_error(exc):
                logger.debug("Bucket %r has no tag set", bucket_name)
                return {}
            raise
        if "TagSet" not in response:
            raise MalformedResponseError("GetBucketTagging", "response has no TagSet")
        return tags_from_tag_list(response["TagSet"], "GetBucketTagging")


def _bucket_region(head: dict[str, Any]) -> str | None:
    region = head.get("BucketRegion")
    if region:
        return str(region)
    headers = head.get("ResponseMetadata", {}).get("HTTPHeaders", {})
    return headers.get(_REGION_HEADER) or None
