"""Timestamp pairs and the no-follow metadata primitives.

All instants are integer nanoseconds since the Unix epoch, read straight from
lstat() so sub-second precision and access times survive a round trip.
"""

import os
import re
from dataclasses import dataclass

SOURCE_DATE_EPOCH = "SOURCE_DATE_EPOCH"
EPOCH = 0
NS_PER_SECOND = 1_000_000_000

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class FileTimestamps:
    atime_ns: int
    mtime_ns: int

    @classmethod
    def uniform(cls, instant_ns):
        return cls(atime_ns=instant_ns, mtime_ns=instant_ns)

    @classmethod
    def from_stat(cls, st):
        return cls(atime_ns=st.st_atime_ns, mtime_ns=st.st_mtime_ns)


def read_timestamps(path):
    """Return the (atime, mtime) pair of path itself, never a symlink target."""
    return FileTimestamps.from_stat(os.lstat(path))


def write_timestamps(path, timestamps):
    """Set atime and mtime on path itself, without dereferencing symlinks.

    Raises NotImplementedError where the platform cannot update a link in place.
    """
    os.utime(
        path,
        ns=(timestamps.atime_ns, timestamps.mtime_ns),
        follow_symlinks=False,
    )


def parse_epoch_seconds(value):
    """Parse a signed decimal seconds count. Returns None if it is not one."""
    if value is None:
        return None
    if not _DECIMAL.fullmatch(value):
        return None
    seconds = int(value)
    if seconds < _INT64_MIN or seconds > _INT64_MAX:
        return None
    return seconds


def resolve_fallback(environ=None, var=SOURCE_DATE_EPOCH):
    """Resolve the fallback instant (ns) for files the command created.

    Epoch zero unless var holds an integer seconds count.
    """
    environ = os.environ if environ is None else environ
    seconds = parse_epoch_seconds(environ.get(var))
    if seconds is None:
        return EPOCH
    return seconds * NS_PER_SECOND
