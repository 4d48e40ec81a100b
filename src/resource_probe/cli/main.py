"""CLI entry point for resource-probe.

Invoked as::

    resource-probe [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m resource_probe.cli.main

Commands
--------
probe       Check whether a resource exists and show its metadata
types       List supported resource types and their aliases
normalize   Print the canonical key for a resource type name
version     Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from resource_probe.config import ClientConfig
    from resource_probe.probers.base import ProbeResult

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level_name: str | None) -> None:
    """Route library logging to stderr through Rich."""
    if level_name is None:
        return
    logging.basicConfig(
        level=level_name.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _resolve_config(config_file: str | None, **overrides: Any) -> "ClientConfig":
    """Environment, then YAML file, then command-line flags; exits on bad input."""
    from resource_probe.config import ClientConfig
    from resource_probe.errors import ConfigError

    try:
        config = ClientConfig.from_env()
        if config_file:
            config = config.merged_with_yaml(config_file)
        return config.merged(**overrides)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _render_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, sort_keys=True, default=str)
    return str(value)


def _print_result(result: "ProbeResult", type_name: str, resource_id: str, output_format: str) -> None:
    payload = result.to_dict()

    if output_format == "json":
        click.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))
        return
    if output_format == "yaml":
        click.echo(yaml.safe_dump(payload, default_flow_style=False, sort_keys=True), nl=False)
        return

    table = Table(title=f"{type_name} {resource_id}", show_header=False, show_lines=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    status = "[green]yes[/green]" if result.exists else "[yellow]no[/yellow]"
    table.add_row("Exists", status)
    if result.exists:
        table.add_row("ARN", escape(result.arn))
        table.add_row("Tags", escape(_render_value(dict(result.tags))) if result.tags else "[dim]none[/dim]")
        for name in sorted(result.properties):
            if name == "Tags":
                continue
            table.add_row(name, escape(_render_value(result.properties[name])))
    console.print(table)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="resource-probe")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Emit library log records at this level to stderr.",
)
def cli(log_level: str | None) -> None:
    """Check whether AWS resources exist and collect their metadata."""
    _configure_logging(log_level)


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    import boto3

    from resource_probe import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]resource-probe[/bold]", f"v{__version__}")
    table.add_row("boto3", boto3.__version__)
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# types command
# ---------------------------------------------------------------------------


@cli.command(name="types")
def types_command() -> None:
    """List supported resource types and the names that map to them."""
    from resource_probe.config import ClientConfig
    from resource_probe.naming import aliases_for
    from resource_probe.registry import ENTRYPOINT_GROUP, ProberRegistry

    registry = ProberRegistry(ClientConfig.from_env(), entrypoint_group=ENTRYPOINT_GROUP)

    table = Table(title="Supported resource types")
    table.add_column("Type", style="bold")
    table.add_column("Aliases")
    for type_key in registry.supported_types():
        aliases = [alias for alias in aliases_for(type_key) if alias != type_key]
        table.add_row(type_key, ", ".join(aliases) or "[dim]-[/dim]")
    console.print(table)


# ---------------------------------------------------------------------------
# normalize command
# ---------------------------------------------------------------------------


@cli.command(name="normalize")
@click.argument("type_name", metavar="TYPE")
def normalize_command(type_name: str) -> None:
    """Print the canonical key for TYPE.

    Examples:

    \b
        resource-probe normalize AWS::S3::Bucket
        resource-probe normalize dynamodb_table
    """
    from resource_probe.naming import normalize_type_name

    click.echo(normalize_type_name(type_name))


# ---------------------------------------------------------------------------
# probe command
# ---------------------------------------------------------------------------


@cli.command(name="probe")
@click.argument("type_name", metavar="TYPE")
@click.argument("resource_id", metavar="ID")
@click.option("--region", default=None, help="AWS region (default: from environment).")
@click.option("--profile", default=None, help="Named AWS profile.")
@click.option("--endpoint-url", default=None, help="Custom endpoint for all AWS calls.")
@click.option(
    "--localstack/--no-localstack",
    default=None,
    help="Target a LocalStack emulator on localhost:4566.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML client configuration file.",
)
@click.option("--timeout", type=click.FloatRange(min=0), default=None, help="Overall deadline in seconds.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format (default: table).",
)
@click.option(
    "--require-exists",
    is_flag=True,
    default=False,
    help="Exit with status 1 when the resource does not exist.",
)
def probe_command(
    type_name: str,
    resource_id: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    localstack: bool | None,
    config_file: str | None,
    timeout: float | None,
    output_format: str,
    require_exists: bool,
) -> None:
    """Check whether the resource ID of kind TYPE exists.

    TYPE may be given in Terraform, CloudFormation or short form.

    Examples:

    \b
        resource-probe probe AWS::S3::Bucket my-bucket
        resource-probe probe aws_dynamodb_table orders --format json
        resource-probe probe s3_bucket assets --localstack --require-exists
    """
    from botocore.exceptions import BotoCoreError, ClientError

    from resource_probe.context import ProbeContext
    from resource_probe.errors import ProbeError
    from resource_probe.registry import ENTRYPOINT_GROUP, ProberRegistry

    config = _resolve_config(
        config_file,
        region=region,
        profile=profile,
        endpoint_url=endpoint_url,
        localstack=localstack,
    )
    registry = ProberRegistry(config, entrypoint_group=ENTRYPOINT_GROUP)
    ctx = ProbeContext.with_timeout(timeout) if timeout is not None else None

    try:
        result = registry.probe(type_name, resource_id, ctx)
    except ProbeError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)
    except (ClientError, BotoCoreError) as exc:
        err_console.print(f"[red]AWS error:[/red] {escape(str(exc))}")
        sys.exit(1)

    _print_result(result, type_name, resource_id, output_format.lower())

    if require_exists and not result.exists:
        err_console.print(f"[yellow]Not found:[/yellow] {type_name} {resource_id}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
