"""
Batch workflows over every repository below a directory.

Each workflow processes repositories one at a time and records a result per
repository in a BatchReport. A failing repository does not stop the batch
unless `BatchConfig.fail_fast` is set.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import TextIO

from .config import BatchConfig
from .git import (
    checkout,
    clone_repo,
    filter_repos_by_ignore_file,
    find_git_repos,
    get_remote_url,
    grep_repo,
    has_uncommitted_changes,
    list_all_revisions,
    pull_branch,
    stash_changes,
)
from .manifest import RepoRecord, read_manifest, write_manifest
from .paths import RemoteParseError, repo_path_from_remote
from .results import BatchReport, Status

logger = logging.getLogger(__name__)


def _stderr_text(error: subprocess.CalledProcessError) -> str:
    stderr = error.stderr or ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    return stderr


def _describe(error: subprocess.CalledProcessError) -> str:
    """Summarize a failed git call as "git <args>: <last stderr line>"."""
    cmd = [str(part) for part in error.cmd]
    if cmd[1:2] == ["-C"]:
        del cmd[1:3]

    lines = _stderr_text(error).strip().splitlines()
    reason = lines[-1] if lines else f"exit status {error.returncode}"
    return f"{' '.join(cmd)}: {reason}"


def _log_output(repo: str | Path, text: str) -> None:
    """Log git output line by line, prefixed with the repository."""
    for line in text.splitlines():
        if line.strip():
            logger.info("%s: %s", repo, line.rstrip())


def _fail(
    report: BatchReport,
    repo: str | Path,
    detail: str,
    config: BatchConfig,
    error: subprocess.CalledProcessError | None = None,
) -> bool:
    """Record a failure and return whether the batch should stop."""
    if error is not None:
        _log_output(repo, _stderr_text(error))
    logger.warning("%s: %s", repo, detail)
    report.add(repo, Status.FAILED, detail)
    if config.fail_fast:
        logger.warning("Stopping after first failure")
    return config.fail_fast


def discover_repos(config: BatchConfig) -> list[Path]:
    """
    Find the repositories a workflow operates on.

    Applies the configured ignore file, if any, on top of find_git_repos.
    """
    repos = find_git_repos(config.root)
    if config.ignore_file:
        repos = filter_repos_by_ignore_file(repos, config.root, config.ignore_file)
    return list(repos)


def scan(config: BatchConfig) -> BatchReport:
    """
    Record the remote URL of every repository in the manifest.

    Repositories without the configured remote are reported as skipped and
    left out of the manifest. The manifest is overwritten.
    """
    report = BatchReport("scan", manifest=config.manifest)
    records = []

    for repo in discover_repos(config):
        url = get_remote_url(config.remote, repo=repo)
        if url is None:
            logger.info("%s has no remote '%s', skipping", repo, config.remote)
            report.add(repo, Status.SKIPPED, f"no remote '{config.remote}'")
            continue
        records.append(RepoRecord(remote=url))
        report.add(repo, Status.OK, url)

    write_manifest(records, config.manifest)
    logger.info("Wrote %s (%d repositories)", config.manifest, len(records))
    return report


def clone(config: BatchConfig) -> BatchReport:
    """
    Clone every repository in the manifest below config.root.

    Each repository goes to the path derived from its remote URL. Existing
    paths are skipped, so running clone again only fills in what is missing.

    Raises:
        ManifestError: If the manifest is missing or malformed. Nothing is
            created in that case.
    """
    records = read_manifest(config.manifest)
    report = BatchReport("clone", manifest=config.manifest)

    for record in records:
        try:
            target = Path(config.root) / repo_path_from_remote(record.remote)
        except RemoteParseError as e:
            if _fail(report, record.remote, str(e), config):
                break
            continue

        if target.exists():
            logger.info("%s already exists, skipping", target)
            report.add(target, Status.SKIPPED, "already exists")
            continue

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            if _fail(report, target, f"cannot create {target.parent}: {e}", config):
                break
            continue

        logger.info("Cloning %s into %s", record.remote, target)
        try:
            output = clone_repo(record.remote, target)
        except subprocess.CalledProcessError as e:
            if _fail(report, target, _describe(e), config, e):
                break
            continue
        _log_output(target, output)
        report.add(target, Status.OK, record.remote)

    return report


def grep(pattern: str, config: BatchConfig, out: TextIO | None = None) -> BatchReport:
    """
    Run git grep in every repository and write the matches to out.

    Searches working trees unless config.all_revisions is set, in which case
    every commit reachable from any ref is searched. Repositories without a
    match count as ok.

    Args:
        pattern: Pattern passed to git grep.
        config: Batch settings.
        out: Stream for the matches (default: sys.stdout).
    """
    out = out or sys.stdout
    report = BatchReport("grep")

    for repo in discover_repos(config):
        logger.info("Processing Git repository in %s", repo)

        revisions: list[str] = []
        if config.all_revisions:
            try:
                revisions = list_all_revisions(repo)
            except subprocess.CalledProcessError as e:
                if _fail(report, repo, _describe(e), config, e):
                    break
                continue

        result = grep_repo(pattern, repo=repo, revisions=revisions, color=config.color)

        if result.returncode == 1 and not result.stderr.strip():
            report.add(repo, Status.OK, "no matches")
            continue
        if result.returncode != 0:
            error = subprocess.CalledProcessError(
                result.returncode, result.args, result.stdout, result.stderr
            )
            if _fail(report, repo, _describe(error), config, error):
                break
            continue

        out.write(f"{repo}\n")
        out.write(result.stdout)
        if not result.stdout.endswith("\n"):
            out.write("\n")
        out.flush()
        report.add(repo, Status.OK)

    return report


def pull(config: BatchConfig) -> BatchReport:
    """
    Check out config.branch in every repository and pull it from config.remote.

    Repositories with uncommitted changes are skipped unless config.stash is
    set. With stash, everything is staged and stashed under
    config.stash_message first; the stash is not restored afterwards.
    """
    report = BatchReport("pull")

    for repo in discover_repos(config):
        logger.info("Processing Git repository in %s", repo)
        detail = ""
        try:
            if has_uncommitted_changes(repo):
                if not config.stash:
                    logger.info("%s has uncommitted changes, skipping", repo)
                    report.add(repo, Status.SKIPPED, "uncommitted changes")
                    continue
                stash_changes(repo, message=config.stash_message)
                detail = "stashed local changes"

            checkout(config.branch, repo=repo)
            _log_output(repo, pull_branch(config.remote, config.branch, repo=repo))
        except subprocess.CalledProcessError as e:
            if _fail(report, repo, _describe(e), config, e):
                break
            continue
        report.add(repo, Status.OK, detail)

    return report
