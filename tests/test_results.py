"""Tests for results module."""

from pathlib import Path

from git_batch_utils.results import BatchReport, Status


class TestBatchReport:
    """Tests for BatchReport."""

    def test_empty_report_is_ok(self):
        report = BatchReport("pull")
        assert report.ok
        assert report.summary() == "pull: 0 repositories, 0 ok, 0 skipped, 0 failed"

    def test_counts_and_summary(self):
        report = BatchReport("clone")
        report.add(Path("a/b"), Status.OK)
        report.add("c/d", Status.SKIPPED, "already exists")
        report.add("e/f", Status.FAILED, "boom")

        assert report.count(Status.OK) == 1
        assert report.summary() == "clone: 3 repositories, 1 ok, 1 skipped, 1 failed"

    def test_skipped_is_not_a_failure(self):
        report = BatchReport("scan")
        report.add("a", Status.SKIPPED, "no remote 'origin'")
        assert report.ok

    def test_failed_lists_failures_in_order(self):
        report = BatchReport("grep")
        report.add("a", Status.FAILED, "first")
        report.add("b", Status.OK)
        report.add("c", Status.FAILED, "second")

        assert not report.ok
        assert [r.detail for r in report.failed] == ["first", "second"]

    def test_add_stores_repo_as_string(self):
        result = BatchReport("pull").add(Path("x/y"), Status.OK)
        assert result.repo == str(Path("x/y"))
