#!/usr/bin/env python3
"""Example: LocalStack

Creates a tagged bucket and a DynamoDB table on a local LocalStack
emulator, probes both through one shared registry, then cleans up.

Usage:
    localstack start -d
    python examples/02_localstack.py

Requirements:
    pip install resource-probe
"""
from __future__ import annotations

import json

from resource_probe.config import ClientConfig
from resource_probe.context import ProbeContext
from resource_probe.registry import ProberRegistry

BUCKET = "probe-example-bucket"
TABLE = "probe-example-table"


def main() -> None:
    config = ClientConfig(region="us-east-1", localstack=True)
    s3 = config.client("s3")
    dynamodb = config.client("dynamodb")

    # Step 1: Create the resources
    s3.create_bucket(Bucket=BUCKET)
    s3.put_bucket_tagging(Bucket=BUCKET, Tagging={"TagSet": [{"Key": "Environment", "Value": "dev"}]})
    dynamodb.create_table(
        TableName=TABLE,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "pk", "AttributeType": "S"}],
    )
    dynamodb.get_waiter("table_exists").wait(TableName=TABLE)

    try:
        # Step 2: Probe through one registry; probers are built on first use
        registry = ProberRegistry(config)
        ctx = ProbeContext.with_timeout(15)
        for type_name, resource_id in [
            ("AWS::S3::Bucket", BUCKET),
            ("aws_dynamodb_table", TABLE),
            ("s3_bucket", "no-such-bucket-for-this-example"),
        ]:
            result = registry.probe(type_name, resource_id, ctx)
            print(f"{type_name} {resource_id}:")
            print(json.dumps(result.to_dict(), indent=2, default=str))
        print(registry)
    finally:
        # Step 3: Clean up
        s3.delete_bucket_tagging(Bucket=BUCKET)
        s3.delete_bucket(Bucket=BUCKET)
        dynamodb.delete_table(TableName=TABLE)


if __name__ == "__main__":
    main()
