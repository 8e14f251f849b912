import subprocess

from stampfix.errors import CommandError


def run_command(command, workdir=None):
    """Run command as a child process and wait for it.

    stdin, stdout and stderr are inherited, so the child's I/O passes straight
    through. Raises CommandError on spawn failure or non-zero exit.
    """
    command = list(command)
    if not command:
        raise CommandError(command)
    try:
        result = subprocess.run(command, cwd=workdir)
    except OSError as e:
        raise CommandError(command, cause=e) from e
    if result.returncode != 0:
        raise CommandError(command, returncode=result.returncode)
