from stampfix.walk.base import EntryVisitor, walk_tree


class SnapshotCollector(EntryVisitor):
    """Records every entry's original timestamps. Read-only on the filesystem."""

    def __init__(self, console=None):
        super().__init__(console)
        self.snapshot = {}

    def visit(self, path, timestamps):
        self.snapshot[path] = timestamps


def collect_snapshot(root, console=None):
    """Scan root and return {absolute_path: FileTimestamps}.

    Entries that cannot be read are warned about and left out.
    """
    collector = SnapshotCollector(console)
    walk_tree(root, collector)
    return collector.snapshot
