"""Run-scoped aggregation of parsed violations and recorded failures."""

from threading import Lock

from loguru import logger

from .exceptions import DuplicateSeedRegistrationError
from .models import Report, Violation


class ResultIndex:
    """All violations of one run, keyed by absolute file path.

    Mutated only on the orchestrating thread after invocations have joined,
    so it carries no lock.
    """

    def __init__(self):
        self.file2row: dict[str, list[int]] = {}
        self.file2bugs: dict[str, dict[str, list[int]]] = {}
        self.file2report: dict[str, Report] = {}
        self._file2violations: dict[str, list[Violation]] = {}

    def reset(self) -> None:
        """Drop everything; used between independent runs."""
        self.file2row = {}
        self.file2bugs = {}
        self.file2report = {}
        self._file2violations = {}

    def merge(self, report: Report) -> None:
        """Append a report's lines to the row and bug-type indexes."""
        rows = self.file2row.setdefault(report.file_path, [])
        bugs = self.file2bugs.setdefault(report.file_path, {})
        self._file2violations.setdefault(report.file_path, []).extend(report.violations)
        for violation in report.violations:
            rows.append(violation.line)
            bugs.setdefault(violation.bug_type, []).append(violation.line)

    def is_registered(self, file_path: str) -> bool:
        return file_path in self.file2report

    def register(self, report: Report, report_path: str = "") -> None:
        """Register a single-file report and merge it.

        Raises DuplicateSeedRegistrationError if the file was already
        registered during this run.
        """
        if report.file_path in self.file2report:
            raise DuplicateSeedRegistrationError(report.file_path, report_path)
        self.file2report[report.file_path] = report
        self.merge(report)

    def rows(self, file_path: str) -> list[int]:
        return list(self.file2row.get(file_path, []))

    def bugs(self, file_path: str) -> dict[str, list[int]]:
        return {k: list(v) for k, v in self.file2bugs.get(file_path, {}).items()}

    def bug_counts(self, file_path: str) -> dict[str, int]:
        """Number of violations per bug type for a file."""
        return {k: len(v) for k, v in self.file2bugs.get(file_path, {}).items()}

    def violations(self, file_path: str) -> list[Violation]:
        return list(self._file2violations.get(file_path, []))

    def files(self) -> list[str]:
        return sorted(self.file2row)

    def total_violations(self) -> int:
        return sum(len(rows) for rows in self.file2row.values())

    def __contains__(self, file_path: object) -> bool:
        return file_path in self.file2row

    def __len__(self) -> int:
        return len(self.file2row)


class FailureLedger:
    """Append-only record of failed tool invocations and unreadable reports.

    Worker threads record launch failures concurrently, so appends are
    guarded by a lock.
    """

    def __init__(self):
        self._lock = Lock()
        self._failed_report_paths: list[str] = []
        self._failed_tool_executions: list[str] = []

    def record_report_failure(self, report_path: str) -> None:
        with self._lock:
            self._failed_report_paths.append(report_path)
        logger.warning(f"Failed to parse report: {report_path}")

    def record_tool_failure(self, command: str) -> None:
        with self._lock:
            self._failed_tool_executions.append(command)
        logger.warning(f"Tool execution failed: {command}")

    @property
    def failed_report_paths(self) -> list[str]:
        with self._lock:
            return list(self._failed_report_paths)

    @property
    def failed_tool_executions(self) -> list[str]:
        with self._lock:
            return list(self._failed_tool_executions)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._failed_report_paths and not self._failed_tool_executions
