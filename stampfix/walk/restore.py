from dataclasses import dataclass

from rich.markup import escape

from stampfix.timestamps import FileTimestamps, write_timestamps
from stampfix.walk.base import EntryVisitor, walk_tree


@dataclass
class RestoreReport:
    unchanged: int = 0
    fixed: int = 0
    new: int = 0
    errors: int = 0

    @property
    def visited(self):
        return self.unchanged + self.fixed + self.new

    def as_dict(self):
        return {
            "unchanged": self.unchanged,
            "fixed": self.fixed,
            "new": self.new,
            "errors": self.errors,
        }


class TimestampRestorer(EntryVisitor):
    """Pins pre-existing entries to their snapshot pair and new ones to the fallback.

    Entries whose current pair already equals the snapshot are left alone, so a
    no-op command costs no metadata writes.
    """

    def __init__(self, fallback, snapshot, console=None):
        super().__init__(console)
        self.fallback = FileTimestamps.uniform(fallback)
        self.snapshot = snapshot
        self.report = RestoreReport()

    def visit(self, path, timestamps):
        original = self.snapshot.get(path)
        if original is None:
            self.console.print(f"found new file: {escape(path)}")
            write_timestamps(path, self.fallback)
            self.report.new += 1
        elif timestamps == original:
            self.report.unchanged += 1
        else:
            self.console.print(f"fixing timestamp for: {escape(path)}")
            write_timestamps(path, original)
            self.report.fixed += 1

    def on_error(self, path, error):
        self.report.errors += 1
        super().on_error(path, error)


def restore_timestamps(root, fallback, snapshot, console=None):
    """Re-walk root after the command and reconcile every entry's timestamps.

    fallback is the instant (ns since epoch) given to entries absent from snapshot.
    """
    restorer = TimestampRestorer(fallback, snapshot, console)
    walk_tree(root, restorer)
    return restorer.report
