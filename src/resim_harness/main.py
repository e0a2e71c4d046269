"""CLI main entry point."""

import json
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import load_config
from .errors import HarnessError
from .fixture import ScenarioFixture
from .lock import LedgerLock
from .plan import load_plan, run_plan
from .process import ProcessRunner
from .shared.logging import configure_logging

console = Console()
err_console = Console(stderr=True)


def _fail(error: HarnessError) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    raise SystemExit(1)


def _print_env(env: dict[str, str], title: str, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(env, indent=2, sort_keys=True))
        return

    table = Table(title=title)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in sorted(env):
        table.add_row(key, env[key])
    console.print(table)


@click.group()
@click.option("-c", "--config", type=click.Path(), help="Config file path")
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write JSON logs to a file")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def cli(
    ctx: click.Context,
    config: str | None,
    verbose: int,
    log_file: str | None,
    json_output: bool,
) -> None:
    """Drive resim scenarios and thread their addresses between steps."""
    ctx.ensure_object(dict)
    harness_config = load_config(config)

    level = harness_config.log_level
    if verbose == 1:
        level = "info"
    elif verbose >= 2:
        level = "debug"
    configure_logging(level, log_file=log_file, json_output=bool(log_file))

    ctx.obj["config"] = harness_config
    ctx.obj["json_output"] = json_output


@cli.command()
def version() -> None:
    """Show harness version."""
    click.echo(f"resim-harness {__version__}")


@cli.command()
@click.option("--fresh", is_flag=True, help="Reset the ledger and publish the package first")
@click.pass_context
def env(ctx: click.Context, fresh: bool) -> None:
    """Print the scenario environment.

    Attaches to the current ledger unless --fresh is given.
    """
    config = ctx.obj["config"]
    runner = ProcessRunner()
    try:
        with LedgerLock(config.lock_file):
            if fresh:
                fixture = ScenarioFixture.new_scenario(runner, config)
            else:
                fixture = ScenarioFixture.attach_to_existing(runner, config)
            values = fixture.environment_for()
    except HarnessError as e:
        _fail(e)

    _print_env(values, "Scenario Environment", ctx.obj["json_output"])


@cli.command("run")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def run_cmd(ctx: click.Context, plan_file: str) -> None:
    """Run a scenario plan and print the final environment."""
    config = ctx.obj["config"]
    try:
        plan = load_plan(plan_file)
        with LedgerLock(config.lock_file):
            result = run_plan(plan, ProcessRunner(), config)
    except HarnessError as e:
        _fail(e)

    if not ctx.obj["json_output"]:
        console.print(f"[green]✓[/green] {plan.name}: {len(result.steps)} steps completed")
    _print_env(result.env, f"Environment after {plan.name}", ctx.obj["json_output"])


@cli.group()
def config() -> None:
    """Harness configuration."""


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show effective configuration and where each value came from."""
    harness_config = ctx.obj["config"]
    values = harness_config.as_dict()

    if ctx.obj["json_output"]:
        sources = {key: harness_config.get_source(key) for key in values}
        click.echo(json.dumps({"values": values, "sources": sources}, indent=2))
        return

    table = Table(title="Harness Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")
    for key, value in values.items():
        table.add_row(key, str(value), harness_config.get_source(key))
    console.print(table)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
