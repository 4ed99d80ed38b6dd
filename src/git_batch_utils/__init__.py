"""Batch management of all git repositories below a directory.

This package discovers repositories, records their remotes in a JSON manifest,
re-clones them from that manifest, and runs git grep or git pull across all
of them.
"""

__version__ = "0.1.0"

# Re-export all public functions from submodules
from .config import (
    BatchConfig,
    get_batch_config,
)
from .git import (
    filter_repos_by_ignore_file,
    find_git_repos,
    get_remote_url,
    has_uncommitted_changes,
    run_git,
)
from .manifest import (
    ManifestError,
    RepoRecord,
    read_manifest,
    write_manifest,
)
from .paths import (
    RemoteParseError,
    repo_path_from_remote,
    resolve_path,
)
from .results import (
    BatchReport,
    RepoResult,
    Status,
)
from .workflows import (
    clone,
    grep,
    pull,
    scan,
)

__all__ = (
    "BatchConfig",
    "BatchReport",
    "ManifestError",
    "RemoteParseError",
    "RepoRecord",
    "RepoResult",
    "Status",
    "clone",
    "filter_repos_by_ignore_file",
    "find_git_repos",
    "get_batch_config",
    "get_remote_url",
    "grep",
    "has_uncommitted_changes",
    "pull",
    "read_manifest",
    "repo_path_from_remote",
    "resolve_path",
    "run_git",
    "scan",
    "write_manifest",
)
