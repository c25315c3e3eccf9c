"""Command-line interface for the Optimizely client."""

import asyncio
import sys
from typing import Any, Awaitable, Callable, Optional

import click
from rich.console import Console

from . import __version__
from .core.exceptions import (
    ConfigurationError,
    OptimizelyError,
    ServerError,
    ValidationError,
)
from .integrations.rest_client import OptimizelyClient, decode_body
from .utils.config import ClientConfig
from .utils.log_config import configure_logging

console = Console()


def print_version(ctx, param, value):
    if value:
        python_version = f"{sys.version_info.major}.{sys.version_info.minor}"
        console.print(f"optimizely-client v{__version__} (Python {python_version})")
        ctx.exit()


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.pass_context
def main(ctx, debug: bool):
    """optimizely-client - browse Optimizely projects, experiments and results."""
    try:
        config = ClientConfig.from_env()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)
    configure_logging("DEBUG" if debug else config.log_level)
    ctx.obj = config


def _print_result(result: Any) -> None:
    try:
        data = decode_body(result)
    except ValueError:
        console.print(result)
        return

    if data is None:
        console.print("[yellow]No content[/yellow]")
    else:
        console.print_json(data=data)


def _run(config: ClientConfig, call: Callable[[OptimizelyClient], Awaitable[Any]]) -> None:
    """Build a client, run one call against it and print the outcome."""
    try:
        client = OptimizelyClient.from_config(config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    async def run_call():
        async with client:
            return await call(client)

    try:
        result = asyncio.run(run_call())
    except ValidationError as e:
        console.print(f"[red]Invalid arguments: {e}[/red]")
        sys.exit(1)
    except ServerError as e:
        console.print(f"[red]Server error {e.status_code}[/red]")
        console.print(e.body, markup=False)
        sys.exit(1)
    except OptimizelyError as e:
        console.print(f"[red]Request failed: {e}[/red]")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Unreadable response: {e}[/red]")
        sys.exit(1)

    _print_result(result)


def _dimension(dimension_id: Optional[str], dimension_value: Optional[str]):
    if dimension_id is None and dimension_value is None:
        return None
    return {"id": dimension_id, "value": dimension_value}


@main.command()
@click.pass_obj
def projects(config: ClientConfig):
    """List all projects."""
    _run(config, lambda client: client.get_projects())


@main.command()
@click.argument("project_id")
@click.pass_obj
def project(config: ClientConfig, project_id: str):
    """Show a single project."""
    _run(config, lambda client: client.get_project(project_id))


@main.command()
@click.argument("project_id")
@click.pass_obj
def experiments(config: ClientConfig, project_id: str):
    """List the experiments of a project."""
    _run(config, lambda client: client.get_experiments(project_id))


@main.command()
@click.argument("experiment_id")
@click.pass_obj
def experiment(config: ClientConfig, experiment_id: str):
    """Show a single experiment."""
    _run(config, lambda client: client.get_experiment(experiment_id))


@main.command("find-experiment")
@click.argument("project_id")
@click.argument("description")
@click.pass_obj
def find_experiment(config: ClientConfig, project_id: str, description: str):
    """Find an experiment in a project by its exact description."""
    _run(
        config,
        lambda client: client.get_experiment_by_description(project_id, description),
    )


@main.command()
@click.argument("experiment_id")
@click.option("--dimension-id", help="Segment results by this custom dimension")
@click.option("--dimension-value", help="Dimension value to segment by")
@click.pass_obj
def results(config: ClientConfig, experiment_id: str, dimension_id: str, dimension_value: str):
    """Show classic results of an experiment."""
    options = {"id": experiment_id, "dimension": _dimension(dimension_id, dimension_value)}
    _run(config, lambda client: client.get_results(options))


@main.command()
@click.argument("experiment_id")
@click.option("--dimension-id", help="Segment stats by this custom dimension")
@click.option("--dimension-value", help="Dimension value to segment by")
@click.pass_obj
def stats(config: ClientConfig, experiment_id: str, dimension_id: str, dimension_value: str):
    """Show stats engine results of an experiment."""
    options = {"id": experiment_id, "dimension": _dimension(dimension_id, dimension_value)}
    _run(config, lambda client: client.get_stats(options))


@main.command()
@click.argument("project_id")
@click.pass_obj
def audiences(config: ClientConfig, project_id: str):
    """List the audiences of a project."""
    _run(config, lambda client: client.get_audiences(project_id))


@main.command()
@click.argument("project_id")
@click.pass_obj
def dimensions(config: ClientConfig, project_id: str):
    """List the custom dimensions of a project."""
    _run(config, lambda client: client.get_dimensions(project_id))


@main.command()
@click.argument("project_id")
@click.pass_obj
def goals(config: ClientConfig, project_id: str):
    """List the goals of a project."""
    _run(config, lambda client: client.get_goals(project_id))


@main.command("config-check")
@click.pass_obj
def config_check(config: ClientConfig):
    """Validate the environment configuration without calling the API."""
    try:
        config.validate()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    console.print("[green]Configuration OK[/green]")
    console.print(f"  Address: {config.address}")
    console.print(f"  Auth: {'Bearer (OAuth2)' if config.use_bearer_auth else 'Token header'}")
    console.print(f"  Timeout: {config.timeout if config.timeout else 'none'}")


if __name__ == "__main__":
    main()
