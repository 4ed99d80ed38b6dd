"""Per-repository outcomes of a batch run."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Status(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RepoResult:
    """What happened to one repository."""

    repo: str
    status: Status
    detail: str = ""


@dataclass
class BatchReport:
    """
    Ordered results of one workflow run.

    Results are appended in processing order. The report is ok when no
    repository failed; skipped repositories do not count as failures.
    """

    command: str
    results: list[RepoResult] = field(default_factory=list)
    manifest: Path | None = None

    def add(self, repo: str | Path, status: Status, detail: str = "") -> RepoResult:
        result = RepoResult(repo=str(repo), status=status, detail=detail)
        self.results.append(result)
        return result

    def count(self, status: Status) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def failed(self) -> list[RepoResult]:
        return [result for result in self.results if result.status is Status.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        """One line with the counts per status, e.g. for the end of a CLI run."""
        return (
            f"{self.command}: {len(self.results)} repositories, "
            f"{self.count(Status.OK)} ok, "
            f"{self.count(Status.SKIPPED)} skipped, "
            f"{self.count(Status.FAILED)} failed"
        )
