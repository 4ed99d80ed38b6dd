"""Core git operations."""

import logging
import os
import subprocess
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from .paths import resolve_path

logger = logging.getLogger(__name__)

# Revisions per git grep call; 1000 hashes are about 41 KB of arguments
REVISION_CHUNK_SIZE = 1000


def run_git(
    *args: str,
    repo: Path | None = None,
    check: bool = True,
    capture: bool = False,
    **kwargs: Any,
) -> subprocess.CompletedProcess:
    """
    Run a git command and return the result.

    Args:
        *args: Git command arguments (e.g., "status", "--porcelain")
        repo: Optional repository path. If None, runs in current directory.
        check: Whether to raise CalledProcessError on non-zero exit (default: True)
        capture: Whether to capture stdout/stderr (default: False)
        **kwargs: Additional arguments to pass to subprocess.run()

    Returns:
        CompletedProcess result

    Raises:
        FileNotFoundError: If the git binary is not on PATH.

    Example:
        # Run in current directory
        run_git("status", "--short", capture=True)

        # Run in specific repo
        run_git("pull", "origin", "master", repo=Path("/path/to/repo"))
    """
    cmd = ["git"]

    # Add -C flag if repo is specified
    if repo is not None:
        cmd.extend(["-C", str(repo)])

    cmd.extend(args)
    logger.debug("Running: %s", " ".join(cmd))

    # Set up capture if requested; git passes file content through as raw
    # bytes, so undecodable output is replaced rather than raised
    if capture:
        kwargs.setdefault("errors", "replace")
        return subprocess.run(
            cmd, capture_output=True, text=True, check=check, **kwargs
        )

    return subprocess.run(cmd, check=check, **kwargs)


def git_config(
    key: str,
    repo: Path | None = None,
    default: str | None = None,
) -> str | None:
    """
    Get a git config value.

    Args:
        key: Config key to retrieve (e.g., "user.name", "batch.branch")
        repo: Optional repository path. If None, uses current directory.
        default: Default value if config key is not set.

    Returns:
        Config value if set, otherwise default.

    Example:
        branch = git_config("batch.branch", default="master")
    """
    result = run_git("config", key, repo=repo, capture=True, check=False)
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return default


def git_config_bool(
    key: str,
    repo: Path | None = None,
    default: bool = False,
) -> bool:
    """
    Get a boolean git config value, normalized by git itself.

    Accepts everything git accepts for booleans (yes/no, on/off, 1/0, ...).
    An invalid value makes git exit non-zero, in which case default is used.
    """
    result = run_git("config", "--type=bool", key, repo=repo, capture=True, check=False)
    if result.returncode == 0 and (value := result.stdout.strip()):
        return value == "true"
    return default


def get_remote_url(remote: str = "origin", repo: Path | None = None) -> str | None:
    """
    Get the URL configured for a remote.

    Args:
        remote: Remote name (default: "origin").
        repo: Optional repository path. If None, uses current directory.

    Returns:
        The remote URL, or None if the remote is not configured.

    Example:
        url = get_remote_url(repo=Path("/path/to/repo"))
    """
    result = run_git("remote", "get-url", remote, repo=repo, capture=True, check=False)
    if result.returncode == 0 and (url := result.stdout.strip()):
        return url
    return None


def has_uncommitted_changes(repo: Path | None = None) -> bool:
    """
    Check if there are uncommitted changes in the working tree.

    This includes both tracked and untracked files.

    Args:
        repo: Optional repository path. If None, uses current directory.

    Returns:
        True if there are uncommitted changes, False otherwise

    Example:
        if has_uncommitted_changes():
            print("You have uncommitted changes")
    """
    result = run_git("status", "--porcelain", repo=repo, capture=True)
    return bool(result.stdout.strip())


def stash_changes(repo: Path | None = None, message: str | None = None) -> None:
    """
    Stage everything in the working tree and stash it.

    Staging first makes untracked files part of the stash.

    Args:
        repo: Optional repository path. If None, uses current directory.
        message: Optional stash message so the entry can be found later.
    """
    run_git("add", ".", repo=repo, capture=True)

    args = ["stash", "push"]
    if message:
        args.extend(["-m", message])
    run_git(*args, repo=repo, capture=True)


def _combined_output(result: subprocess.CompletedProcess) -> str:
    return "\n".join(text.strip() for text in (result.stdout, result.stderr) if text.strip())


def checkout(branch: str, repo: Path | None = None) -> None:
    """Switch the working tree to branch."""
    run_git("checkout", branch, repo=repo, capture=True)


def pull_branch(remote: str, branch: str, repo: Path | None = None) -> str:
    """Pull branch from remote into the current branch; return git's output."""
    result = run_git("pull", remote, branch, repo=repo, capture=True)
    return _combined_output(result)


def clone_repo(url: str, target: Path) -> str:
    """
    Clone url into target.

    Args:
        url: Remote URL to clone.
        target: Directory to clone into. Must not exist yet.

    Returns:
        What git printed on stdout and stderr.

    Example:
        clone_repo("git@example.com:team/svc.git", Path("team/svc"))
    """
    result = run_git("clone", url, str(target), capture=True)
    return _combined_output(result)


def list_all_revisions(repo: Path | None = None) -> list[str]:
    """
    List every commit reachable from any ref.

    Args:
        repo: Optional repository path. If None, uses current directory.

    Returns:
        Commit hashes, newest first. Empty for a repository without commits.
    """
    result = run_git("rev-list", "--all", repo=repo, capture=True)
    return result.stdout.split()


def grep_repo(
    pattern: str,
    repo: Path | None = None,
    revisions: Iterable[str] = (),
    color: bool = False,
    chunk_size: int | None = None,
) -> subprocess.CompletedProcess:
    """
    Search a repository with git grep.

    Searches the working tree, or the given revisions when any are passed.
    Revisions are passed to git in chunks of at most chunk_size (default:
    REVISION_CHUNK_SIZE) so long histories stay below the OS argument limit;
    the output of all chunks is concatenated.

    The process result is returned unchecked: git grep exits 1 when nothing
    matches, which callers usually do not treat as an error. With several
    chunks the exit status is 0 if any chunk matched, otherwise the first
    error status, otherwise 1.

    Args:
        pattern: Pattern to search for.
        repo: Optional repository path. If None, uses current directory.
        revisions: Revisions to search instead of the working tree.
        color: Whether to force colored output.
        chunk_size: Maximum number of revisions per git invocation.

    Returns:
        CompletedProcess with captured stdout/stderr.

    Example:
        result = grep_repo("TODO", repo=Path("/path/to/repo"))
        print(result.stdout)
    """
    args = [
        "grep",
        "--all-match",
        "--break",
        "--heading",
        "--line-number",
        "--color=always" if color else "--color=never",
        "-e",
        pattern,
    ]

    revisions = list(revisions)
    if not revisions:
        return run_git(*args, "--", repo=repo, capture=True, check=False)

    chunk_size = chunk_size or REVISION_CHUNK_SIZE
    results = [
        run_git(*args, *revisions[start:start + chunk_size], "--", repo=repo, capture=True, check=False)
        for start in range(0, len(revisions), chunk_size)
    ]
    if len(results) == 1:
        return results[0]

    codes = [result.returncode for result in results]
    if 0 in codes:
        returncode = 0
    else:
        returncode = next((code for code in codes if code != 1), 1)

    # --break separates files with an empty line; keep that between chunks
    stdout = "\n".join(result.stdout for result in results if result.stdout)
    stderr = "".join(result.stderr for result in results)
    return subprocess.CompletedProcess(results[0].args, returncode, stdout, stderr)


def find_git_repos(
    root_dir: str | Path,
    include_worktrees: bool = False,
) -> Iterator[Path]:
    """
    Find all git repositories under root_dir.

    Yields repository paths (parent of .git directory), including
    repositories nested inside other repositories. Symbolic links are not
    followed, and directories that cannot be read are skipped.

    Args:
        root_dir: Root directory to search for git repositories
        include_worktrees: If True, also yield directories where .git is a
                          file (worktrees and submodules).

    Yields:
        Repository paths, in directory walk order (children sorted by name)

    Example:
        for repo in find_git_repos(Path.home() / "develop"):
            print(repo.name)
    """
    def skip_unreadable(error: OSError) -> None:
        logger.debug("Skipping unreadable entry %s: %s", error.filename, error.strerror)

    for dirpath, dirnames, filenames in os.walk(root_dir, onerror=skip_unreadable):
        if ".git" in dirnames:
            dirnames.remove(".git")
            yield Path(dirpath)
        elif include_worktrees and ".git" in filenames:
            yield Path(dirpath)

        # Walk in a stable order
        dirnames.sort()


def filter_repos_by_ignore_file(
    repos: Iterable[Path],
    root_dir: str | Path,
    ignore_filename: str,
) -> Iterator[Path]:
    """
    Filter repositories based on gitignore-style ignore files.

    Reads ignore files hierarchically (like .gitignore) and filters
    the repository list using gitignore-style patterns. Supports:
    - Simple patterns: repo-name
    - Wildcards: archived-*, */node_modules
    - Path patterns: third-party/*, wolf/*/old
    - Negation: !important-repo
    - Comments: # lines starting with hash

    Ignore files are checked from root_dir upward, with patterns in
    deeper directories taking precedence.

    Args:
        repos: Iterator or list of repository paths to filter
        root_dir: Root directory that was searched (used to find ignore files)
        ignore_filename: Name of ignore file to look for (e.g., ".batchignore")

    Yields:
        Repository paths that are not ignored

    Example:
        repos = find_git_repos(Path.home() / "develop")
        for repo in filter_repos_by_ignore_file(repos, Path.home() / "develop", ".batchignore"):
            print(f"Active repo: {repo.name}")
    """
    import pathspec

    root_dir = resolve_path(root_dir)

    # Collect ignore files from root_dir upward, then read root first
    # so deeper files override
    ignore_files = []
    for parent in [root_dir] + list(root_dir.parents):
        ignore_file = parent / ignore_filename
        if ignore_file.is_file():
            ignore_files.append(ignore_file)
    ignore_files.reverse()

    patterns = []
    for ignore_file in ignore_files:
        with open(ignore_file) as f:
            patterns.extend(f.read().splitlines())

    if not patterns:
        yield from repos
        return

    spec = pathspec.GitIgnoreSpec.from_lines(patterns)

    for repo in repos:
        try:
            rel_path = repo.resolve().relative_to(root_dir)
        except ValueError:
            # Repo is outside root_dir, don't filter it
            yield repo
            continue

        if spec.match_file(str(rel_path)):
            logger.debug("Ignoring %s (matched %s)", repo, ignore_filename)
            continue
        yield repo
