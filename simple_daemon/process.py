"""
Process Control - OS facilities used by the daemon.

Handles:
- Environment lookups
- Process title (via setproctitle)
- The initial working directory, captured once
- Replacing this process with a fresh copy of itself (reload)
"""

import os
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import NoReturn

import setproctitle
import structlog

from .config import config
from .errors import CwdUnavailable, RestartFailure
from .paths import current_binary_path, normalize

__all__ = ["Process", "process"]

logger = structlog.get_logger(__name__)

ExecFunction = Callable[[str, list[str], dict[str, str]], None]


def _default_argv() -> list[str]:
    # Re-run the same interpreter with the same script/module and flags.
    return [sys.executable, *sys.orig_argv[1:]]


def _same_file(a: str, b: str) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return os.path.realpath(a) == os.path.realpath(b)


class Process:
    """Wraps the OS-level side of the daemon process.

    The initial working directory is captured on the first call to
    initial_cwd() and never changes afterwards, even if a component calls
    os.chdir(). The daemon primes it on startup; call it yourself before
    changing directory if you do that even earlier.

    Example:
        proc = Process()
        proc.initial_cwd()
        proc.set_title("my-daemon")
        ...
        proc.restart()  # never returns
    """

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
        execve: ExecFunction | None = None,
        getcwd: Callable[[], str] | None = None,
        hint_var: str = "_",
        script_argv: Sequence[str] | None = None,
    ) -> None:
        """Initialize process control.

        Args:
            argv: Argument vector including the program name (default: interpreter argv)
            environ: Environment mapping (default: os.environ, read live)
            execve: Image replacement function (default: os.execve)
            getcwd: Working directory lookup (default: os.getcwd)
            hint_var: Environment variable holding the invocation path
            script_argv: Argument vector as the program sees it, script first
                (default: argv[1:] when argv is given, else sys.argv)
        """
        self._argv = list(argv) if argv is not None else None
        self._script_argv = list(script_argv) if script_argv is not None else None
        self._environ = environ if environ is not None else os.environ
        self._execve = execve or os.execve
        self._getcwd = getcwd or os.getcwd
        self.hint_var = hint_var
        self._initial_cwd: str | None = None

    @property
    def argv(self) -> list[str]:
        """Argument vector used for restart, program name first."""
        if self._argv is None:
            return _default_argv()
        return list(self._argv)

    @property
    def script_argv(self) -> list[str]:
        """Argument vector of the running program, script or entry point first."""
        if self._script_argv is not None:
            return list(self._script_argv)
        if self._argv is not None:
            return self._argv[1:]
        return list(sys.argv)

    def get_env(self, key: str) -> str | None:
        """Get an environment variable, None if it is not set.

        An empty variable is present and returned as "".
        """
        return self._environ.get(key)

    def set_title(self, title: str) -> None:
        """Set the process title. Best effort, never raises."""
        try:
            setproctitle.setproctitle(title)
        except Exception as e:
            logger.debug("set_title_failed", title=title, error=str(e))

    def initial_cwd(self) -> str:
        """Working directory as seen on the very first call.

        Raises:
            CwdUnavailable: If the working directory lookup fails
        """
        if self._initial_cwd is None:
            try:
                self._initial_cwd = self._getcwd()
            except OSError as e:
                raise CwdUnavailable(e) from e
        return self._initial_cwd

    def binary_path(self) -> str:
        """Absolute path of the binary this process was started from."""
        argv = self.argv
        return current_binary_path(
            self.get_env(self.hint_var),
            argv[0],
            self.initial_cwd(),
        )

    def restart(self) -> NoReturn:
        """Replace this process with a new instance of itself.

        Executes the very same binary with the very same arguments and the
        full current environment. When the binary is the interpreter the
        interpreter's own arguments follow it; when it is a script or a
        console entry point (how $_ reads after a shell launch) the
        script's arguments do.

        Raises:
            CwdUnavailable: If the binary path needs the cwd and it is gone
            RestartFailure: If the process image could not be replaced
        """
        binary = self.binary_path()
        args = self._restart_args(binary)
        env = dict(self._environ)

        logger.info("process_restarting", binary=binary, args=args)
        try:
            self._execve(binary, [binary, *args], env)
        except OSError as e:
            raise RestartFailure(binary, e) from e

        # Only reachable with a test double standing in for execve
        raise RestartFailure(binary, OSError("exec returned"))

    def _restart_args(self, binary: str) -> list[str]:
        argv = self.argv
        if _same_file(binary, normalize(argv[0], self.initial_cwd())):
            return argv[1:]
        return self.script_argv[1:]


# Process-wide instance; its cwd cache lives as long as the process
process = Process(hint_var=config.binary_hint_var)
