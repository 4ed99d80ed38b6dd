"""
Command-line interface for git-batch.

Runs one batch workflow (scan, clone, grep, pull) over every git repository
below a directory and prints a summary of the per-repository results.
"""

import argparse
import logging
import sys

from . import __version__
from .config import BatchConfig
from .results import BatchReport, Status
from .workflows import clone, grep, pull, scan

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s" if not verbose else "%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _get_config(args: argparse.Namespace) -> BatchConfig:
    """Build BatchConfig from git config and CLI args."""
    return BatchConfig.from_git_config(
        root=args.root,
        manifest=args.manifest,
        fail_fast=args.fail_fast or None,
        remote=getattr(args, "remote", None),
        branch=getattr(args, "branch", None),
        stash=getattr(args, "stash", False) or None,
        all_revisions=getattr(args, "all_revisions", False) or None,
        color=sys.stdout.isatty(),
    )


def _print_report(report: BatchReport) -> int:
    """Print skipped and failed repositories plus the totals; return the exit code."""
    for result in report.results:
        if result.status is Status.SKIPPED:
            print(f"  - {result.repo}: skipped ({result.detail})")
        elif result.status is Status.FAILED:
            print(f"  ! {result.repo}: {result.detail}")

    print(report.summary())
    return 0 if report.ok else 1


# ─── Command Handlers ────────────────────────────────────────────────

def cmd_scan(args: argparse.Namespace) -> int:
    """Record the remotes of all repositories in the manifest."""
    return _print_report(scan(_get_config(args)))


def cmd_clone(args: argparse.Namespace) -> int:
    """Clone all repositories listed in the manifest."""
    return _print_report(clone(_get_config(args)))


def cmd_grep(args: argparse.Namespace) -> int:
    """Run git grep in all repositories."""
    return _print_report(grep(args.pattern, _get_config(args)))


def cmd_pull(args: argparse.Namespace) -> int:
    """Pull all repositories from their upstream."""
    return _print_report(pull(_get_config(args)))


# ─── Argument Parser ─────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="git-batch",
        description="Manage all git repositories below a directory in one go.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  git-batch scan                 # Record remotes in .git_projects.json\n"
            "  git-batch clone                # Clone everything from the manifest\n"
            "  git-batch grep TODO            # Search all working trees\n"
            "  git-batch pull --stash         # Stash local changes, then pull\n"
            "\n"
            "Defaults can be set with git config, e.g.\n"
            "  git config --global batch.branch main\n"
        ),
    )

    parser.add_argument(
        "--version", action="version", version=f"git-batch {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--root", help="Directory to search for repositories or clone into (default: .)"
    )
    parser.add_argument(
        "--manifest", help="Manifest file (default: batch.manifest or .git_projects.json)"
    )
    parser.add_argument(
        "--fail-fast",
        dest="fail_fast",
        action="store_true",
        help="Stop at the first repository that fails",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ─── scan ─────────────────────────────────
    subparsers.add_parser("scan", help="Record the remote of every repository in the manifest")

    # ─── clone ────────────────────────────────
    subparsers.add_parser("clone", help="Clone every repository listed in the manifest")

    # ─── grep ─────────────────────────────────
    grep_parser = subparsers.add_parser("grep", help="Run git grep in every repository")
    grep_parser.add_argument("pattern", help="Pattern to search for")
    grep_parser.add_argument(
        "--all-revisions",
        dest="all_revisions",
        action="store_true",
        help="Search every commit reachable from any ref instead of the working tree",
    )

    # ─── pull ─────────────────────────────────
    pull_parser = subparsers.add_parser("pull", help="Check out and pull a branch in every repository")
    pull_parser.add_argument("--remote", help="Remote to pull from (default: origin)")
    pull_parser.add_argument("--branch", help="Branch to check out and pull (default: master)")
    pull_parser.add_argument(
        "--stash",
        action="store_true",
        help="Stage and stash uncommitted changes instead of skipping the repository",
    )

    return parser


# ─── Main Entry Point ────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(verbose=args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    handlers = {
        "scan": cmd_scan,
        "clone": cmd_clone,
        "grep": cmd_grep,
        "pull": cmd_pull,
    }

    try:
        return handlers[args.command](args)
    except KeyboardInterrupt:
        print("\n\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            logger.exception("Error: %s", e)
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
