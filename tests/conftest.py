"""Shared pytest fixtures for git-batch-utils tests."""

import subprocess
from pathlib import Path

import pytest


def git(*args, cwd):
    """Run git in cwd for test setup, failing loudly."""
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content)
    git("add", name, cwd=repo)
    git("commit", "-m", message, cwd=repo)


def make_repo(path: Path, remote: str | None = None) -> Path:
    """Create a repository with one commit and an optional origin remote."""
    path.mkdir(parents=True)
    git("init", cwd=path)
    commit_file(path, "README.md", "# Test Repo\n", "Initial commit")
    if remote is not None:
        git("remote", "add", "origin", remote, cwd=path)
    return path


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory, monkeypatch):
    """
    Keep tests away from the user's git configuration.

    The global config is a temporary file with an identity and
    init.defaultBranch=master. Tests may append to it (e.g. insteadOf rules).

    Returns:
        Path: Path to the temporary global config file
    """
    config = tmp_path_factory.mktemp("gitconfig") / "config"
    config.write_text(
        "[user]\n"
        "\temail = test@example.com\n"
        "\tname = Test User\n"
        "[init]\n"
        "\tdefaultBranch = master\n"
        "[protocol \"file\"]\n"
        "\tallow = always\n"
    )
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    return config


@pytest.fixture
def git_repo(tmp_path):
    """
    Create a temporary git repository for testing.

    Returns:
        Path: Path to the temporary git repository
    """
    return make_repo(tmp_path / "test-repo")


@pytest.fixture
def git_repo_with_remote(tmp_path, git_repo):
    """
    Create a git repository with a remote (bare repo).

    Returns:
        tuple: (main_repo_path, remote_repo_path)
    """
    remote_repo = tmp_path / "remote.git"
    remote_repo.mkdir()
    git("init", "--bare", cwd=remote_repo)

    git("remote", "add", "origin", str(remote_repo), cwd=git_repo)
    git("push", "-u", "origin", "master", cwd=git_repo)

    return git_repo, remote_repo


class FakeRemotes:
    """
    Local bare repositories standing in for `git@example.com:` and
    `https://example.com/` remotes.

    `create("teamA/svc.git")` makes a bare repository with one commit.
    `activate()` adds insteadOf rules to the global config so those remote
    URLs clone from the local repositories. Until then, remotes are plain
    strings, which is what scan needs since `git remote get-url` reports
    rewritten URLs.
    """

    def __init__(self, root: Path, global_config: Path):
        self.root = root
        self.global_config = global_config
        root.mkdir()

    def create(self, relative: str) -> Path:
        bare = self.root / relative
        bare.mkdir(parents=True)
        git("init", "--bare", cwd=bare)

        seed = self.root.parent / "seed" / relative
        make_repo(seed)
        git("push", str(bare), "master", cwd=seed)
        return bare

    def activate(self) -> None:
        base = self.root.as_uri() + "/"
        with open(self.global_config, "a") as f:
            f.write(
                f"[url \"{base}\"]\n"
                "\tinsteadOf = git@example.com:\n"
                "\tinsteadOf = https://example.com/\n"
            )


@pytest.fixture
def fake_remotes(tmp_path, isolated_git_config):
    """
    Provide FakeRemotes rooted in the test's temporary directory.

    Returns:
        FakeRemotes: factory for bare repositories behind example.com URLs
    """
    return FakeRemotes(tmp_path / "remotes", isolated_git_config)
