from stampfix.walk.base import EntryVisitor, walk_tree
from stampfix.walk.collect import SnapshotCollector, collect_snapshot
from stampfix.walk.restore import RestoreReport, TimestampRestorer, restore_timestamps

__all__ = [
    "EntryVisitor",
    "walk_tree",
    "SnapshotCollector",
    "collect_snapshot",
    "RestoreReport",
    "TimestampRestorer",
    "restore_timestamps",
]
