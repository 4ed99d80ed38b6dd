"""Batch configuration, read from git config under the `batch.*` namespace."""

from dataclasses import dataclass, field
from pathlib import Path

from .git import git_config, git_config_bool
from .manifest import DEFAULT_MANIFEST

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "master"
DEFAULT_IGNORE_FILE = ".batchignore"
STASH_MESSAGE = "git-batch: auto-stash before pull"


def get_batch_config(
    key: str,
    repo: Path | None = None,
    default: str | None = None,
) -> str | None:
    """
    Get a batch configuration value.

    Reads from git config under the `batch.*` namespace.

    Args:
        key: Config key without the "batch." prefix (e.g., "branch").
        repo: Optional repository path. If None, uses current directory.
        default: Default value if config key is not set.

    Returns:
        Config value if set, otherwise default.

    Example:
        branch = get_batch_config("branch", default="master")

    """
    return git_config(f"batch.{key}", repo=repo, default=default)


@dataclass
class BatchConfig:
    """
    Settings shared by the batch workflows.

    Relative paths are taken relative to the current directory when a
    workflow runs.
    """

    root: Path = field(default_factory=Path)
    manifest: Path = Path(DEFAULT_MANIFEST)
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    ignore_file: str | None = DEFAULT_IGNORE_FILE
    stash: bool = False
    stash_message: str = STASH_MESSAGE
    all_revisions: bool = False
    fail_fast: bool = False
    color: bool = False

    @classmethod
    def from_git_config(cls, repo: Path | None = None, **overrides) -> "BatchConfig":
        """
        Build a config from `batch.*` git config values.

        Keyword overrides that are not None win over git config, which wins
        over the defaults.

        Example:
            config = BatchConfig.from_git_config(branch="main")

        """
        values = {
            "manifest": Path(get_batch_config("manifest", repo=repo, default=DEFAULT_MANIFEST)),
            "remote": get_batch_config("remote", repo=repo, default=DEFAULT_REMOTE),
            "branch": get_batch_config("branch", repo=repo, default=DEFAULT_BRANCH),
            "ignore_file": get_batch_config("ignoreFile", repo=repo, default=DEFAULT_IGNORE_FILE),
            "stash": git_config_bool("batch.stash", repo=repo),
            "all_revisions": git_config_bool("batch.allRevisions", repo=repo),
            "fail_fast": git_config_bool("batch.failFast", repo=repo),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        values["manifest"] = Path(values["manifest"])
        if "root" in values:
            values["root"] = Path(values["root"])
        return cls(**values)
