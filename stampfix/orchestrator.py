import os
import shlex
import stat

from rich.markup import escape

from stampfix.errors import CommandError, InvalidDirectoryError
from stampfix.log import get_console, write_log
from stampfix.runner import run_command
from stampfix.timestamps import EPOCH
from stampfix.tracing import StageTimer
from stampfix.walk import collect_snapshot, restore_timestamps


def validate_directory(directory):
    """Return the absolute path of directory, or raise InvalidDirectoryError."""
    try:
        st = os.stat(directory)
    except OSError as e:
        raise InvalidDirectoryError(directory, e) from e
    if not stat.S_ISDIR(st.st_mode):
        raise InvalidDirectoryError(directory)
    return os.path.abspath(directory)


def _audit(console, entry):
    """Append entry to the run log. A log that cannot be written only warns."""
    try:
        write_log(entry)
    except OSError as e:
        console.print(f"[yellow]Warning: cannot write audit log: {escape(str(e))}[/yellow]")


def run_pinned(directory, command, chdir=False, fallback=EPOCH, console=None, audit=True):
    """Scan directory, run command, then pin every timestamp in the tree.

    Entries that existed before the command get their original (atime, mtime)
    back; entries the command created get fallback (ns since epoch). If the
    command fails, nothing is restored and CommandError propagates.
    """
    console = console if console is not None else get_console()
    root = validate_directory(directory)
    command = list(command)
    timer = StageTimer(console)

    console.print("Scanning original timestamps...")
    snapshot = collect_snapshot(root, console)
    console.print(f"Found {len(snapshot)} files/directories")
    timer.mark("scan")

    console.print(f"Executing command: {escape(shlex.join(command))}")
    try:
        run_command(command, workdir=root if chdir else None)
    except CommandError as e:
        if audit:
            _audit(console, {
                "event": "run",
                "directory": root,
                "command": command,
                "result": "command_failed",
                "returncode": e.returncode,
            })
        raise
    timer.mark("command")

    console.print("Resetting timestamps...")
    report = restore_timestamps(root, fallback, snapshot, console)
    console.print(f"Checked {report.visited} entries: {report.fixed} fixed, {report.new} new")
    timer.mark("restore")

    if audit:
        _audit(console, {
            "event": "run",
            "directory": root,
            "command": command,
            "result": "pinned",
            **report.as_dict(),
        })
    return report
