import os
from datetime import datetime

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stampfix.config import load_config
from stampfix.errors import StampfixError
from stampfix.log import get_console, read_logs
from stampfix.orchestrator import run_pinned, validate_directory
from stampfix.timestamps import resolve_fallback


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.version_option(package_name="stampfix")
@click.option(
    "--cd/--no-cd",
    "chdir",
    default=None,
    help="Change to DIRECTORY before executing COMMAND (default from config: off).",
)
@click.option("--no-audit", is_flag=True, help="Do not record this run in ~/.stampfix/logs.jsonl.")
@click.argument("directory")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def main(chdir, no_audit, directory, command):
    """Run COMMAND while pinning every timestamp under DIRECTORY.

    Files that existed before keep their original access and modification
    times. Files the command creates get $SOURCE_DATE_EPOCH, or the Unix epoch
    when it is unset or not an integer.

    Example: stampfix --cd build/ make -j4
    """
    console = get_console()
    try:
        root = validate_directory(directory)
        config = load_config(root)
        if chdir is None:
            chdir = bool(config["cd"])
        fallback = resolve_fallback(os.environ, config["epoch_var"])
        run_pinned(
            root,
            command,
            chdir=chdir,
            fallback=fallback,
            console=console,
            audit=config["audit_log"] and not no_audit,
        )
    except StampfixError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)


@click.command()
@click.option("-n", "--limit", default=20, help="Number of log entries to show.")
@click.option("--all", "show_all", is_flag=True, help="Show runs for all directories.")
def logs(limit, show_all):
    """Show the run audit log for the current directory."""
    console = Console()

    entries = read_logs(None if show_all else os.path.abspath(os.getcwd()))
    if not entries:
        console.print("[dim]No logs found.[/dim]")
        return

    table = Table(title="Run Log")
    table.add_column("Time", style="dim")
    table.add_column("Directory", max_width=40)
    table.add_column("Command", max_width=40)
    table.add_column("Result", style="bold")
    table.add_column("New", justify="right")
    table.add_column("Fixed", justify="right")

    for entry in entries[-limit:]:
        ts = entry.get("timestamp", "")
        if ts:
            try:
                ts = datetime.fromisoformat(ts).strftime("%m-%d %H:%M")
            except ValueError:
                pass
        result = entry.get("result", "")
        result_style = {
            "pinned": "[green]pinned[/green]",
            "command_failed": "[red]command failed[/red]",
        }.get(result, escape(result))
        table.add_row(
            ts,
            escape(entry.get("directory", "")),
            escape(" ".join(entry.get("command", []))),
            result_style,
            str(entry.get("new", "")),
            str(entry.get("fixed", "")),
        )

    console.print(table)
