"""Tests for ResultIndex and FailureLedger."""

import threading

import pytest

from statfier.exceptions import DuplicateSeedRegistrationError
from statfier.models import Report, ToolKind, Violation


def make_report(path: str, *entries: tuple[int, str]) -> Report:
    report = Report(path, ToolKind.PMD)
    for line, bug_type in entries:
        report.add_violation(Violation(path, line, bug_type, ToolKind.PMD))
    return report


class TestResultIndex:
    """Test merging, registration and queries."""

    def test_merge_keeps_order(self):
        from statfier.results import ResultIndex

        index = ResultIndex()
        index.merge(make_report("/a/X.java", (5, "R1"), (2, "R2"), (7, "R1")))

        assert index.rows("/a/X.java") == [5, 2, 7]
        assert index.bugs("/a/X.java") == {"R1": [5, 7], "R2": [2]}
        assert index.bug_counts("/a/X.java") == {"R1": 2, "R2": 1}
        assert "/a/X.java" in index
        assert len(index) == 1

    def test_queries_return_copies(self):
        from statfier.results import ResultIndex

        index = ResultIndex()
        index.merge(make_report("/a/X.java", (1, "R1")))

        index.rows("/a/X.java").append(99)
        index.bugs("/a/X.java")["R1"].append(99)

        assert index.rows("/a/X.java") == [1]
        assert index.bugs("/a/X.java") == {"R1": [1]}

    def test_unknown_file(self):
        from statfier.results import ResultIndex

        index = ResultIndex()

        assert index.rows("/missing") == []
        assert index.bugs("/missing") == {}
        assert index.violations("/missing") == []

    def test_register_twice_raises(self):
        from statfier.results import ResultIndex

        index = ResultIndex()
        index.register(make_report("/a/X.java", (1, "R1")), "r1.json")

        with pytest.raises(DuplicateSeedRegistrationError):
            index.register(make_report("/a/X.java", (2, "R1")), "r2.json")

        assert index.rows("/a/X.java") == [1]

    def test_reset(self):
        from statfier.results import ResultIndex

        index = ResultIndex()
        index.register(make_report("/a/X.java", (1, "R1")))

        index.reset()

        assert len(index) == 0
        assert not index.is_registered("/a/X.java")
        index.register(make_report("/a/X.java", (3, "R1")))
        assert index.rows("/a/X.java") == [3]

    def test_files_sorted_and_total(self):
        from statfier.results import ResultIndex

        index = ResultIndex()
        index.merge(make_report("/b/Y.java", (1, "R")))
        index.merge(make_report("/a/X.java", (1, "R"), (2, "R")))

        assert index.files() == ["/a/X.java", "/b/Y.java"]
        assert index.total_violations() == 3


class TestFailureLedger:
    """Test the thread-safe failure record."""

    def test_records(self):
        from statfier.results import FailureLedger

        ledger = FailureLedger()
        assert ledger.is_empty()

        ledger.record_report_failure("/r/a.xml")
        ledger.record_tool_failure("pmd check -d /s")

        assert ledger.failed_report_paths == ["/r/a.xml"]
        assert ledger.failed_tool_executions == ["pmd check -d /s"]
        assert not ledger.is_empty()

    def test_properties_are_copies(self):
        from statfier.results import FailureLedger

        ledger = FailureLedger()
        ledger.failed_report_paths.append("x")

        assert ledger.failed_report_paths == []

    def test_concurrent_appends(self):
        from statfier.results import FailureLedger

        ledger = FailureLedger()

        def worker(n):
            for i in range(50):
                ledger.record_tool_failure(f"cmd-{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(ledger.failed_tool_executions) == 400
