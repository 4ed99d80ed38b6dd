"""Tests for config module."""

from pathlib import Path

import pytest

from conftest import git
from git_batch_utils.config import BatchConfig, get_batch_config


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


class TestGetBatchConfig:
    """Tests for get_batch_config function."""

    def test_returns_default_when_not_set(self, workdir):
        assert get_batch_config("branch", default="DEFAULT") == "DEFAULT"

    def test_returns_none_when_not_set_and_no_default(self, workdir):
        assert get_batch_config("branch") is None

    def test_reads_global_config_outside_a_repo(self, workdir):
        git("config", "--global", "batch.branch", "main", cwd=workdir)
        assert get_batch_config("branch") == "main"

    def test_repo_config_overrides_global(self, git_repo):
        git("config", "--global", "batch.remote", "global-remote", cwd=git_repo)
        git("config", "batch.remote", "local-remote", cwd=git_repo)
        assert get_batch_config("remote", repo=git_repo) == "local-remote"


class TestBatchConfig:
    """Tests for BatchConfig."""

    def test_defaults(self):
        config = BatchConfig()
        assert config.root == Path()
        assert config.manifest == Path(".git_projects.json")
        assert config.remote == "origin"
        assert config.branch == "master"
        assert config.ignore_file == ".batchignore"
        assert config.stash is False
        assert config.all_revisions is False
        assert config.fail_fast is False

    def test_from_git_config_without_settings_matches_defaults(self, workdir):
        assert BatchConfig.from_git_config() == BatchConfig()

    def test_from_git_config_reads_batch_namespace(self, workdir):
        for key, value in [
            ("batch.manifest", "repos.json"),
            ("batch.remote", "upstream"),
            ("batch.branch", "main"),
            ("batch.ignoreFile", ".skiprepos"),
            ("batch.stash", "yes"),
            ("batch.allRevisions", "true"),
            ("batch.failFast", "on"),
        ]:
            git("config", "--global", key, value, cwd=workdir)

        config = BatchConfig.from_git_config()

        assert config.manifest == Path("repos.json")
        assert config.remote == "upstream"
        assert config.branch == "main"
        assert config.ignore_file == ".skiprepos"
        assert config.stash is True
        assert config.all_revisions is True
        assert config.fail_fast is True

    def test_overrides_win_over_git_config(self, workdir):
        git("config", "--global", "batch.branch", "main", cwd=workdir)
        config = BatchConfig.from_git_config(branch="develop", root="src", manifest="m.json")
        assert config.branch == "develop"
        assert config.root == Path("src")
        assert config.manifest == Path("m.json")

    def test_none_overrides_are_ignored(self, workdir):
        git("config", "--global", "batch.branch", "main", cwd=workdir)
        config = BatchConfig.from_git_config(branch=None, stash=None)
        assert config.branch == "main"
        assert config.stash is False
