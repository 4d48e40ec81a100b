#!/usr/bin/env python3
"""Example: Quickstart

Minimal working example: normalize a few resource type names, list the
supported types, and probe an S3 bucket using credentials and region
from the environment.

Usage:
    python examples/01_quickstart.py my-bucket

Requirements:
    pip install resource-probe
"""
from __future__ import annotations

import sys

import resource_probe


def main() -> None:
    print(f"resource-probe version: {resource_probe.__version__}")

    # Step 1: Every naming convention folds onto one canonical key
    for name in ("AWS::S3::Bucket", "s3_bucket", "aws_s3_bucket", "AWS::Lambda::Function"):
        print(f"  {name:<24} -> {resource_probe.normalize_type_name(name)}")

    # Step 2: Kinds with a built-in prober
    print(f"Supported types: {', '.join(resource_probe.supported_types())}")

    # Step 3: Probe a bucket with a ten second deadline
    bucket = sys.argv[1] if len(sys.argv) > 1 else "my-bucket"
    result = resource_probe.probe("AWS::S3::Bucket", bucket, timeout=10)
    if result.exists:
        print(f"Found {result.arn}")
        for key, value in sorted(result.tags.items()):
            print(f"  tag {key}={value}")
    else:
        print(f"Bucket {bucket!r} does not exist")


if __name__ == "__main__":
    main()
