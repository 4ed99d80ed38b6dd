"""Path resolution utilities, including local paths derived from remote URLs."""

from pathlib import Path, PurePosixPath


class RemoteParseError(ValueError):
    """Raised when a remote URL cannot be mapped to a repository path."""


def resolve_path(path: str | Path | None = None) -> Path:
    """
    Resolve a path to an absolute Path object.

    Args:
        path: Path to resolve. If None or empty string, returns current directory.

    Returns:
        Absolute Path object

    Example:
        resolve_path("~/projects")  # Returns /home/user/projects
        resolve_path(None)           # Returns current directory
    """
    if not path:
        return Path.cwd()

    return Path(path).expanduser().resolve()


def _is_ssh_style(remote: str) -> bool:
    # user@host:path, but not scheme://user@host/path
    if "://" in remote:
        return False
    head, sep, _ = remote.partition(":")
    return bool(sep) and "@" in head and "/" not in head


def repo_path_from_remote(remote: str) -> Path:
    """
    Derive the relative path a repository is cloned to from its remote URL.

    Two shapes are understood:
    - SSH: `git@host:group/name.git` -> `group/name`
    - HTTP(S): `https://host/group/name.git` -> `group/name`

    Args:
        remote: Remote URL as reported by `git remote get-url`.

    Returns:
        Relative path for the local clone.

    Raises:
        RemoteParseError: If the remote has another shape, lacks the `.git`
            suffix, or would resolve to an empty, absolute, or parent path.

    >>> repo_path_from_remote("git@example.com:teamA/svc.git")
    PosixPath('teamA/svc')
    """
    remote = remote.strip()

    if _is_ssh_style(remote):
        path = remote.split(":", 1)[1]
    elif remote.startswith("http"):
        # Drop scheme, the empty segment after "//", and host
        path = "/".join(remote.split("/")[3:])
    else:
        raise RemoteParseError(f"cannot resolve repository path: {remote}")

    if not path.endswith(".git"):
        raise RemoteParseError(f"cannot resolve repository path (no .git suffix): {remote}")
    path = path.removesuffix(".git")

    relative = PurePosixPath(path)
    if not path or relative.is_absolute() or ".." in relative.parts:
        raise RemoteParseError(f"cannot resolve repository path: {remote}")

    return Path(*relative.parts)
