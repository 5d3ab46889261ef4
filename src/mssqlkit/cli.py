#!/usr/bin/env python3
"""
mssqlkit CLI - run queries and dump schema from the command line.

Connection settings come from --connection-string, --config, an
mssqlkit.yml found by walking up from the current directory, or the
MSSQLKIT_CONNECTION_STRING environment variable, in that order.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from mssqlkit.configs.connection_string import describe_target, mask_connection_string
from mssqlkit.configs.constants import CONFIG_FILE_NAME
from mssqlkit.configs.settings import MssqlKitSettings
from mssqlkit.connections import MssqlDatabase
from mssqlkit.messages import get_logger
from mssqlkit.utility.exceptions import ConfigError, MssqlKitError


def _parse_param_value(value: str) -> Any:
    """Parse CLI parameter value to appropriate type."""
    lowered = value.lower()
    if lowered == "null":
        return None
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value.lstrip("-").isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _parse_params(params: tuple) -> Dict[str, Any]:
    """Turn ('Name=value', ...) into {'@Name': value, ...}."""
    parsed = {}
    for param in params:
        if "=" not in param:
            raise click.BadParameter(
                f"Invalid --param format: {param}. Use name=value "
                "(e.g., --param CustomerId=42)",
                param_hint="--param",
            )
        name, value = param.split("=", 1)
        name = name.strip()
        if not name.startswith("@"):
            name = f"@{name}"
        parsed[name] = _parse_param_value(value)
    return parsed


def _load_settings(ctx: click.Context) -> MssqlKitSettings:
    connection_string = ctx.obj.get("connection_string")
    config_path = ctx.obj.get("config")
    if connection_string:
        return MssqlKitSettings.from_dict(
            {"connection_string": connection_string}, expand_env=False
        )
    if config_path:
        return MssqlKitSettings.from_yaml(config_path)
    return MssqlKitSettings.find()


def _open_database(ctx: click.Context) -> MssqlDatabase:
    return MssqlDatabase.from_settings(_load_settings(ctx))


def _read_query_file(query_file: Optional[str]) -> Optional[str]:
    if not query_file:
        return None
    return Path(query_file).read_text(encoding="utf-8")


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _fail(error: Exception, logger) -> None:
    if isinstance(error, ConfigError):
        click.echo(f"Configuration error: {error}")
    else:
        click.echo(f"Error: {error}")
        logger.debug(f"Command failed: {error!r}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="mssqlkit")
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False),
    help=f"Path to a settings file (default: nearest {CONFIG_FILE_NAME})",
)
@click.option(
    "--connection-string",
    "-s",
    help="ODBC connection string (overrides the settings file)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def mssqlkit(
    ctx: click.Context,
    config: Optional[str],
    connection_string: Optional[str],
    verbose: bool,
):
    """
    mssqlkit - SQL Server queries and schema introspection for scripts
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["connection_string"] = connection_string

    if verbose:
        for name in ("mssqlkit.connections.mssql", "mssqlkit.schema.mapper"):
            get_logger(name).set_level(logging.DEBUG)


@mssqlkit.command()
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help=f"Overwrite an existing {CONFIG_FILE_NAME}",
)
def init(force: bool):
    """Write a starter mssqlkit.yml in the current directory."""
    logger = get_logger("mssqlkit.cli.init")
    target = Path.cwd() / CONFIG_FILE_NAME

    if target.exists() and not force:
        click.echo(f"{CONFIG_FILE_NAME} already exists in {Path.cwd()}")
        click.echo("Use --force to overwrite it")
        sys.exit(1)

    target.write_text(
        """# mssqlkit settings
connection_string: "${MSSQL_CONNECTION_STRING:-Server=localhost;Database=master;Trusted_Connection=yes;TrustServerCertificate=yes}"

# Schema introspection defaults
default_schema: dbo
# cleaning_token: tbl_

# Connection options
timeout: 30
autocommit: true
""",
        encoding="utf-8",
    )
    click.echo(f"Created {target}")
    logger.success(f"Initialized {CONFIG_FILE_NAME} in {Path.cwd()}")


@mssqlkit.command()
@click.pass_context
def debug(ctx: click.Context):
    """Show the resolved settings and test the connection."""
    logger = get_logger("mssqlkit.cli.debug")
    try:
        settings = _load_settings(ctx)
        click.echo("Settings are valid")
        click.echo(
            f"Connection string: {mask_connection_string(settings.connection_string)}"
        )
        click.echo(f"Default schema: {settings.default_schema}")
        target = describe_target(settings.connection_string)
        logger.start(f"Testing connection to {target}")
        db = MssqlDatabase.from_settings(settings)
        result = db.execute_scalar("SELECT 1 AS test_value")
        click.echo(f"Connection successful! Test query returned: {result}")
        logger.success("Connection debug completed")
    except MssqlKitError as e:
        _fail(e, logger)


@mssqlkit.command()
@click.argument("sql")
@click.option(
    "--param",
    "-p",
    multiple=True,
    help="Query parameter as name=value (e.g., --param CustomerId=42)",
)
@click.option("--scalar", is_flag=True, help="Print only the first value")
@click.pass_context
def query(ctx: click.Context, sql: str, param: tuple, scalar: bool):
    """Run a query and print the rows as JSON."""
    logger = get_logger("mssqlkit.cli.query")
    parameters = _parse_params(param)
    try:
        db = _open_database(ctx)
        if scalar:
            _echo_json(db.execute_scalar(sql, parameters))
        else:
            _echo_json(list(db.execute_query(sql, parameters).rows))
    except MssqlKitError as e:
        _fail(e, logger)


@mssqlkit.command()
@click.argument("sql")
@click.option(
    "--param",
    "-p",
    multiple=True,
    help="Statement parameter as name=value (e.g., --param Name=Ada)",
)
@click.pass_context
def execute(ctx: click.Context, sql: str, param: tuple):
    """Run INSERT/UPDATE/DELETE and print the affected row count."""
    logger = get_logger("mssqlkit.cli.execute")
    parameters = _parse_params(param)
    try:
        db = _open_database(ctx)
        affected = db.execute_non_query(sql, parameters)
        click.echo(f"{affected} row(s) affected")
    except MssqlKitError as e:
        _fail(e, logger)


_schema_options = [
    click.option("--schema", help="Schema name (default from settings, or dbo)"),
    click.option("--cleaning-token", "-t", help="Prefix stripped from table names"),
    click.option(
        "--query-file",
        type=click.Path(exists=True, dir_okay=False),
        help="File with a query to run instead of the built-in one",
    ),
]


def schema_options(func):
    for option in reversed(_schema_options):
        func = option(func)
    return func


@mssqlkit.command()
@schema_options
@click.pass_context
def entities(
    ctx: click.Context,
    schema: Optional[str],
    cleaning_token: Optional[str],
    query_file: Optional[str],
):
    """Print the tables of a schema with their columns as JSON."""
    logger = get_logger("mssqlkit.cli.entities")
    try:
        db = _open_database(ctx)
        loaded = db.load_entities(schema, _read_query_file(query_file), cleaning_token)
        _echo_json([entity.model_dump() for entity in loaded])
    except MssqlKitError as e:
        _fail(e, logger)


@mssqlkit.command()
@schema_options
@click.pass_context
def relationships(
    ctx: click.Context,
    schema: Optional[str],
    cleaning_token: Optional[str],
    query_file: Optional[str],
):
    """Print the foreign keys of a schema as JSON."""
    logger = get_logger("mssqlkit.cli.relationships")
    try:
        db = _open_database(ctx)
        loaded = db.load_relationships(
            schema, _read_query_file(query_file), cleaning_token
        )
        _echo_json([relationship.model_dump(by_alias=True) for relationship in loaded])
    except MssqlKitError as e:
        _fail(e, logger)


if __name__ == "__main__":
    mssqlkit()
