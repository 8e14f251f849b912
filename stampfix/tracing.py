"""Stage timing for a pinned run.

StageTimer wraps the scan, command and restore stages and prints elapsed
wall-clock time after each one.
"""

import time


class StageTimer:
    """Prints elapsed wall-clock time after each named stage.

    Usage:
        t = StageTimer(console)
        collect_snapshot(root)
        t.mark("scan")      # prints "  scan  0.1s"
    """

    def __init__(self, console):
        self.console = console
        self._stage_start = time.monotonic()

    def mark(self, label):
        elapsed = time.monotonic() - self._stage_start
        self._stage_start = time.monotonic()
        self.console.print(f"  [dim]{label}  {elapsed:.1f}s[/dim]")
        return elapsed
