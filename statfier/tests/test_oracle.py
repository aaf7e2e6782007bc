"""Tests for the differential oracle."""

from statfier.models import Report, ToolKind, Violation
from statfier.oracle import DifferentialOracle
from statfier.results import ResultIndex


def add(index: ResultIndex, path: str, *entries: tuple[int, str]) -> None:
    report = Report(path, ToolKind.PMD)
    for line, bug_type in entries:
        report.add_violation(Violation(path, line, bug_type, ToolKind.PMD))
    index.merge(report)


class TestDifferentialOracle:
    """Test seed/mutant comparison by bug-type counts."""

    def test_shifted_lines_are_consistent(self):
        index = ResultIndex()
        add(index, "/s/A.java", (3, "R1"))
        add(index, "/s/A_iter1.java", (7, "R1"))

        assert DifferentialOracle(index).find_inconsistencies() == []

    def test_lost_and_gained_findings(self):
        index = ResultIndex()
        add(index, "/s/A.java", (3, "R1"), (4, "R1"))
        add(index, "/s/A_iter1.java", (3, "R1"), (9, "R2"))

        found = DifferentialOracle(index).find_inconsistencies()

        assert [(i.bug_type, i.seed_count, i.mutant_count, i.kind) for i in found] == [
            ("R1", 2, 1, "false_negative"),
            ("R2", 0, 1, "false_positive"),
        ]
        assert found[0].seed_path == "/s/A.java"
        assert found[0].mutant_path == "/s/A_iter1.java"

    def test_explicit_mutants_without_findings(self):
        index = ResultIndex()
        add(index, "/s/A.java", (3, "R1"))

        found = DifferentialOracle(index).find_inconsistencies(["/s/A_iter1.java", "/s/A_iter2.java"])

        assert [i.mutant_path for i in found] == ["/s/A_iter1.java", "/s/A_iter2.java"]

    def test_seeds_are_not_paired(self):
        index = ResultIndex()
        add(index, "/s/A.java", (3, "R1"))

        assert DifferentialOracle(index).pairs() == []
