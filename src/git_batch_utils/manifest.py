"""JSON manifest of discovered repositories and their remotes."""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = ".git_projects.json"


class ManifestError(Exception):
    """Raised when the manifest is missing, unreadable, or malformed."""


@dataclass(frozen=True)
class RepoRecord:
    """One repository entry in the manifest."""

    remote: str


def write_manifest(records: list[RepoRecord], path: str | Path) -> Path:
    """
    Write records to path as a pretty-printed JSON array.

    Any previous content is overwritten. Parent directories are created.

    Args:
        records: Records in the order they should appear in the file.
        path: Manifest file location.

    Returns:
        The path written to.

    Example:
        write_manifest([RepoRecord("git@example.com:team/svc.git")], ".git_projects.json")
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = [asdict(record) for record in records]
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote %d records to %s", len(records), path)
    return path


def read_manifest(path: str | Path) -> list[RepoRecord]:
    """
    Read records from a manifest written by write_manifest.

    Args:
        path: Manifest file location.

    Returns:
        Records in file order.

    Raises:
        ManifestError: If the file does not exist (run `scan` first), cannot
            be read, is not valid UTF-8 JSON, or is not an array of objects with a
            string "remote" field.
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestError(
            f"manifest {path} not found; run 'scan' first"
        ) from None
    except UnicodeDecodeError as e:
        raise ManifestError(f"malformed manifest {path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"cannot read manifest {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"malformed manifest {path}: {e}") from e

    if not isinstance(data, list):
        raise ManifestError(f"malformed manifest {path}: expected a JSON array")

    records = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or not isinstance(entry.get("remote"), str):
            raise ManifestError(
                f"malformed manifest {path}: entry {index} has no string 'remote'"
            )
        records.append(RepoRecord(remote=entry["remote"]))
    return records
