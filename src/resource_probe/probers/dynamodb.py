"""DynamoDB table prober.

``DescribeTable`` answers both the existence question and most of the
descriptive properties. Tags need a separate, paginated
``ListTagsOfResource`` call keyed by the table ARN.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from botocore.exceptions import ClientError

from resource_probe.context import ProbeContext
from resource_probe.errors import MalformedResponseError, is_not_found_error
from resource_probe.probers.base import Prober, ProbeResult, tags_from_tag_list

logger = logging.getLogger(__name__)

# DescribeTable members copied into properties as reported.
_PASSTHROUGH_FIELDS: tuple[str, ...] = (
    "ItemCount",
    "TableSizeBytes",
    "KeySchema",
    "AttributeDefinitions",
    "CreationDateTime",
    "ProvisionedThroughput",
    "StreamSpecification",
)


class DynamoDBTableProber(Prober):
    """Probe for ``aws_dynamodb_table`` resources."""

    resource_type = "aws_dynamodb_table"
    service_name = "dynamodb"

    def probe(self, resource_id: str, ctx: ProbeContext | None = None) -> ProbeResult:
        ctx = ctx or ProbeContext.background()

        try:
            response = ctx.call(self._client.describe_table, TableName=resource_id)
        except ClientError as exc:
            if is_not_found_error(exc):
                logger.debug("Table %r not found: %s", resource_id, exc)
                return ProbeResult.not_found()
            raise

        table = response.get("Table")
        if not isinstance(table, Mapping):
            raise MalformedResponseError("DescribeTable", "response has no Table")
        arn = table.get("TableArn")
        if not arn:
            raise MalformedResponseError("DescribeTable", "Table has no TableArn")

        properties = _table_properties(table)
        tags = self._fetch_tags(arn, ctx)
        properties["Tags"] = dict(tags)

        return ProbeResult(exists=True, arn=arn, tags=tags, properties=properties)

    def _fetch_tags(self, arn: str, ctx: ProbeContext) -> dict[str, str]:
        tags: dict[str, str] = {}
        kwargs: dict[str, Any] = {"ResourceArn": arn}
        while True:
            page = ctx.call(self._client.list_tags_of_resource, **kwargs)
            tags.update(tags_from_tag_list(page.get("Tags", []), "ListTagsOfResource"))
            next_token = page.get("NextToken")
            if not next_token:
                return tags
            kwargs["NextToken"] = next_token


def _table_properties(table: Mapping[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for name in ("TableName", "TableStatus"):
        if not table.get(name):
            raise MalformedResponseError("DescribeTable", f"Table has no {name}")
        properties[name] = table[name]
    for name in _PASSTHROUGH_FIELDS:
        if name in table:
            properties[name] = table[name]

    billing = table.get("BillingModeSummary") or {}
    if "BillingMode" in billing:
        properties["BillingMode"] = billing["BillingMode"]

    table_class = table.get("TableClassSummary") or {}
    if "TableClass" in table_class:
        properties["TableClass"] = table_class["TableClass"]

    for name in ("GlobalSecondaryIndexes", "LocalSecondaryIndexes"):
        if name in table:
            properties[name] = _member_names(table[name], name, "IndexName")

    if "Replicas" in table:
        properties["Replicas"] = _member_names(table["Replicas"], "Replicas", "RegionName")

    return properties


def _member_names(entries: Any, member: str, key: str) -> list[Any]:
    """Pull *key* out of each entry of a DescribeTable list member."""
    if not isinstance(entries, list):
        raise MalformedResponseError("DescribeTable", f"{member} is not a list")
    names = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise MalformedResponseError("DescribeTable", f"{member} entry {entry!r} is not a mapping")
        names.append(entry.get(key))
    return names
