import io
import os
import time

import pytest
from rich.console import Console


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """Keep the audit log and global config out of the real home directory."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr("stampfix.log.LOGS_FILE", home / ".stampfix" / "logs.jsonl")
    monkeypatch.setattr("stampfix.config.GLOBAL_CONFIG_FILE", home / ".stampfix" / "config.json")
    monkeypatch.delenv("SOURCE_DATE_EPOCH", raising=False)
    return home


@pytest.fixture
def unwritable_log(tmp_path_factory, monkeypatch):
    """Point the audit log under a regular file so every write fails."""
    blocker = tmp_path_factory.mktemp("blocked") / "home"
    blocker.write_text("not a directory")
    monkeypatch.setattr("stampfix.log.LOGS_FILE", blocker / ".stampfix" / "logs.jsonl")
    return blocker


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=1000, highlight=False)


@pytest.fixture
def set_times():
    def _set_times(path, atime_ns, mtime_ns):
        os.utime(path, ns=(atime_ns, mtime_ns), follow_symlinks=False)
    return _set_times


@pytest.fixture
def settle():
    """Let the clock move past the tree's last change.

    Under relatime a directory read only bumps atime while atime <= mtime/ctime;
    with coarse timestamp ticks that comparison can still hold right after the
    tree was built.
    """
    return lambda: time.sleep(0.05)
