"""
Path resolution for self re-execution.

Pure functions: nothing here touches the filesystem, and the only ambient
input is os.getcwd() when normalize() is called without a cwd.
"""

import os

__all__ = ["current_binary_path", "normalize"]

SEP = "/"


def normalize(path: str, cwd: str | None = None) -> str:
    """Return an absolute, normalized version of ``path``.

    Relative paths are joined to ``cwd`` (the current working directory if
    omitted). Repeated separators collapse, ``.`` segments are dropped and
    ``..`` removes the preceding segment. ``..`` at the root removes nothing.

    Unlike os.path.normpath, a leading ``//`` is not preserved.

    Example:
        >>> normalize("/a/./b/../c")
        '/a/c'
        >>> normalize("./x", cwd="/home/u")
        '/home/u/x'
    """
    if not path.startswith(SEP):
        base = cwd if cwd is not None else os.getcwd()
        path = f"{base}{SEP}{path}"

    parts: list[str] = []
    for part in path.split(SEP):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)

    return SEP + SEP.join(parts)


def current_binary_path(hint: str | None, argv0: str, initial_cwd: str) -> str:
    """Resolve the path of the running binary.

    The invocation hint (usually ``$_`` from the launching shell) wins when
    present and non-empty. Otherwise argv[0] is resolved against the
    *initial* working directory, so a later chdir() cannot break it.
    """
    if hint:
        return hint
    return normalize(argv0, initial_cwd)
