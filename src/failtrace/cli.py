"""Click command group exposing metadata, the example chain, and a pool stress run.

Purpose
-------
Give operators a quick way to see the conditional emission in action
(``failtrace demo --fail``) and to hammer the pool from many threads
(``failtrace stress``) without writing a host application.

Contents
--------
* :func:`cli` – root group with traceback and dotenv toggles.
* ``info``, ``demo``, ``stress`` subcommands.
* :func:`main` – entry point used by the console script and ``python -m``.

System Role
-----------
Presentation layer only; every command delegates to :mod:`failtrace.runtime`
and :mod:`failtrace.demo`. Exit-code mapping and traceback rendering are left
to :mod:`lib_cli_exit_tools`.
"""

from __future__ import annotations

import os
from typing import Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as config_module
from . import demo as demo_module
from . import runtime
from .domain import BufferPool
from .adapters import DiscardSink, UuidProvider
from .runtime import SINK_NAMES

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def summary_info() -> str:
    """Return the metadata banner printed by ``failtrace info``.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show the full Python traceback when a command fails.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load FAILTRACE_* variables from the nearest .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command; prints the metadata banner when no subcommand is given."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--fail/--succeed", default=True, show_default=True, help="Make the innermost call fail.")
@click.option("--sink", type=click.Choice(SINK_NAMES), default=None, help="Override the output sink.")
def cli_demo(fail: bool, sink: str | None) -> None:
    """Run the handle -> a -> b example; only a failing run prints its trace."""

    if sink is not None:
        runtime.init(sink=sink)
    demo_module.handle(fail=fail)


@cli.command("stress", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--workers", type=click.IntRange(min=1), default=8, show_default=True)
@click.option("--cycles", type=click.IntRange(min=1), default=1000, show_default=True)
def cli_stress(workers: int, cycles: int) -> None:
    """Run concurrent acquire/flush cycles against a private pool."""

    pool = BufferPool(sink=DiscardSink(), id_provider=UuidProvider())
    report = demo_module.run_stress(pool, workers=workers, cycles=cycles)
    click.echo(
        f"cycles={report.cycles} collisions={report.collisions} "
        f"allocated={report.allocated} idle={report.idle}"
    )
    if report.collisions:
        raise click.ClickException(f"{report.collisions} identifier collision(s) detected")


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so repeated in-process invocations (tests, REPL) start from the same
    state.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main", "summary_info"]
