import importlib
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click
from graphql import GraphQLSchema, print_schema
from pydantic import ValidationError
from rich.traceback import install

from graphql_annotations import __version__, log
from graphql_annotations.builder import create_schema
from graphql_annotations.exceptions import ConfigurationError
from graphql_annotations.settings import load_builder_settings


class ClassReference(click.ParamType):
    """A class given as ``package.module:ClassName``."""

    name = "module:class"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> type:
        if isinstance(value, type):
            return value
        return import_class(value, lambda message: self.fail(message, param, ctx))


def import_class(reference: str, fail: Callable[[str], Any]) -> type:
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        fail(f"'{reference}' is not of the form module:ClassName")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        fail(f"Cannot import module '{module_name}': {e}")
    target: Any = module
    for part in attribute.split("."):
        target = getattr(target, part, None)
    if not isinstance(target, type):
        fail(f"'{reference}' is not a class")
    return target  # type: ignore[no-any-return]


query_option = click.option(
    "--query",
    "-q",
    type=ClassReference(),
    required=True,
    help="Class of the query root, as module:ClassName",
)

mutation_option = click.option(
    "--mutation",
    "-m",
    type=ClassReference(),
    help="Class of the mutation root, as module:ClassName",
)

types_option = click.option(
    "--type",
    "-t",
    "types",
    type=ClassReference(),
    multiple=True,
    help="Additional class to build, e.g. an interface implementation. Can be specified multiple times.",
)

config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file containing builder settings",
)

optional_output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    required=False,
    help="Output file",
)


def build_schema_or_exit(
    query: type, mutation: type | None, types: tuple[type, ...], config: Path | None
) -> GraphQLSchema:
    try:
        settings = load_builder_settings(config)
        return create_schema(query, mutation, types, settings=settings)
    except ConfigurationError as e:
        log.error(f"Invalid type metadata: {e}")
        sys.exit(1)
    except (ValidationError, TypeError) as e:
        log.error(f"Invalid settings or schema: {e}")
        sys.exit(1)
    except OSError as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)


@click.group(context_settings={"auto_envvar_prefix": "graphql_annotations"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@cli.command()
@query_option
@mutation_option
@types_option
@config_option
@optional_output_option
def schema(
    query: type, mutation: type | None, types: tuple[type, ...], config: Path | None, output: Path | None
) -> None:
    """Print the GraphQL schema (SDL) built from annotated classes."""
    graphql_schema = build_schema_or_exit(query, mutation, types, config)
    sdl = print_schema(graphql_schema)

    if output:
        output.write_text(sdl)
        log.success(f"Schema written to {output}")
    else:
        click.echo(sdl)


@cli.command(name="types")
@query_option
@mutation_option
@types_option
@config_option
def list_types(query: type, mutation: type | None, types: tuple[type, ...], config: Path | None) -> None:
    """List the types built from annotated classes with their number of fields."""
    graphql_schema = build_schema_or_exit(query, mutation, types, config)

    for name, named_type in sorted(graphql_schema.type_map.items()):
        if name.startswith("__"):
            continue
        fields = getattr(named_type, "fields", None)
        log.key_value(name, f"{len(fields)} fields" if fields is not None else type(named_type).__name__)
    log.success(f"{len(graphql_schema.type_map)} types")


if __name__ == "__main__":
    cli()
