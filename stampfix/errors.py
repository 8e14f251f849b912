class StampfixError(Exception):
    """Base class for fatal stampfix errors. The CLI exits non-zero on these."""


class InvalidDirectoryError(StampfixError):
    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{path} is not a valid directory{detail}")


class WalkError(StampfixError):
    """The tree walk could not start (root vanished or unreadable)."""

    def __init__(self, root, cause):
        self.root = root
        self.cause = cause
        super().__init__(f"cannot walk {root}: {cause}")


class CommandError(StampfixError):
    """The wrapped command could not be spawned or exited non-zero."""

    def __init__(self, command, returncode=None, cause=None):
        self.command = list(command)
        self.returncode = returncode
        self.cause = cause
        if cause is not None:
            reason = str(cause)
        elif returncode is not None:
            reason = f"exit status {returncode}"
        else:
            reason = "empty command"
        super().__init__(f"command failed: {self.command}: {reason}")


class ConfigError(StampfixError):
    pass
