"""Resource type-name normalization.

AWS resource kinds are spelled three different ways depending on where
the name comes from:

    - Terraform style:       ``aws_s3_bucket``
    - CloudFormation style:  ``AWS::S3::Bucket``
    - Short style:           ``s3_bucket``

``normalize_type_name`` folds all three onto one canonical snake_case key
so the registry can index probers by a single string.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

_CLOUDFORMATION_SEPARATOR = "::"

_TYPE_ALIASES: dict[str, str] = {
    # DynamoDB
    "aws_dynamodb_table": "aws_dynamodb_table",
    "AWS::DynamoDB::Table": "aws_dynamodb_table",
    "AWS::DynamoDB::GlobalTable": "aws_dynamodb_table",
    "dynamodb_table": "aws_dynamodb_table",
    # S3
    "aws_s3_bucket": "aws_s3_bucket",
    "AWS::S3::Bucket": "aws_s3_bucket",
    "s3_bucket": "aws_s3_bucket",
}

ALIASES: Mapping[str, str] = MappingProxyType(_TYPE_ALIASES)


def normalize_type_name(type_name: str) -> str:
    """Return the canonical key for *type_name*.

    Resolution order:

    1. Exact (case-sensitive) lookup in the alias table.
    2. A well-formed ``Namespace::Service::Resource`` name is lower-cased
       segment by segment and joined with ``_``, e.g.
       ``AWS::Lambda::Function`` becomes ``aws_lambda_function``.
    3. Anything else is returned unchanged, including ``""`` and colon
       names with the wrong number of segments or an empty segment.

    The function never raises and is idempotent.

    Parameters
    ----------
    type_name:
        A resource type in any supported naming convention.

    Returns
    -------
    str
        The canonical type key.
    """
    canonical = _TYPE_ALIASES.get(type_name)
    if canonical is not None:
        return canonical

    segments = type_name.split(_CLOUDFORMATION_SEPARATOR)
    if len(segments) == 3 and all(segments):
        return "_".join(segment.lower() for segment in segments)

    return type_name


def aliases_for(canonical: str) -> list[str]:
    """Return every alias-table input that maps to *canonical*, sorted."""
    return sorted(alias for alias, target in _TYPE_ALIASES.items() if target == canonical)
