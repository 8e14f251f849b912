"""Console output and the run audit log.

Human-facing lines go to stderr; stdout belongs to the wrapped command.
Each run appends a structured JSON entry to ~/.stampfix/logs.jsonl with
timestamp, directory, command, result and restore counters.
"""

import json
from datetime import datetime
from pathlib import Path

from rich.console import Console

LOGS_FILE = Path.home() / ".stampfix" / "logs.jsonl"

_console = Console(stderr=True, highlight=False)


def get_console():
    return _console


def write_log(entry):
    """Append a run log entry."""
    LOGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    entry["timestamp"] = datetime.now().isoformat()
    with open(LOGS_FILE, "a") as f:
        f.write(json.dumps(entry) + "\n")


def read_logs(directory=None):
    """Return logged entries, oldest first. Filter to one directory if given.

    Lines that are not valid JSON are skipped.
    """
    if not LOGS_FILE.exists():
        return []
    entries = []
    for line in LOGS_FILE.read_text().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if directory and entry.get("directory") != directory:
            continue
        entries.append(entry)
    return entries
