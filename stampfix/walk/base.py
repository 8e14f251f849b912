import os
import stat
from abc import ABC, abstractmethod

from rich.markup import escape

from stampfix.errors import WalkError
from stampfix.log import get_console
from stampfix.timestamps import read_timestamps


class EntryVisitor(ABC):
    """Per-entry action for walk_tree().

    Implementations: SnapshotCollector (scan), TimestampRestorer (restore).
    """

    def __init__(self, console=None):
        self.console = console if console is not None else get_console()

    @abstractmethod
    def visit(self, path, timestamps):
        """Handle one entry. timestamps is the entry's current lstat() pair."""
        pass

    def on_error(self, path, error):
        """Called for any per-entry failure. The walk always continues."""
        self.console.print(
            f"[yellow]Warning: cannot access {escape(path)}: {escape(str(error))}[/yellow]"
        )


def _list_dir(path):
    """Return [(child_path, is_dir)] in lexical name order. Links are never descended."""
    with os.scandir(path) as it:
        entries = [(entry.name, entry.is_dir(follow_symlinks=False)) for entry in it]
    entries.sort()
    return [(os.path.join(path, name), is_dir) for name, is_dir in entries]


def walk_tree(root, visitor):
    """Visit root and every entry beneath it, depth first, parents before children.

    A directory's listing is read before its own timestamps so the access-time
    update caused by reading it is already in place when the pair is taken.
    Raises WalkError only if the walk cannot start or the root itself vanishes.
    """
    root = os.path.abspath(root)
    try:
        root_stat = os.stat(root)
    except OSError as e:
        raise WalkError(root, e) from e
    if not stat.S_ISDIR(root_stat.st_mode):
        raise WalkError(root, "not a directory")

    pending = [(root, True)]
    while pending:
        path, is_dir = pending.pop()

        children = []
        if is_dir:
            try:
                children = _list_dir(path)
            except OSError as e:
                visitor.on_error(path, e)

        try:
            timestamps = read_timestamps(path)
        except OSError as e:
            if path == root:
                raise WalkError(root, e) from e
            visitor.on_error(path, e)
        else:
            try:
                visitor.visit(path, timestamps)
            except (OSError, NotImplementedError) as e:
                visitor.on_error(path, e)

        pending.extend(reversed(children))
