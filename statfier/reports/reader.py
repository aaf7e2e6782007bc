"""Report reading: parse native reports and merge them into a ResultIndex."""

from pathlib import Path

from loguru import logger

from ..exceptions import DuplicateSeedRegistrationError, ReportFormatError
from ..models import Report, ToolKind, Violation
from ..results import FailureLedger, ResultIndex
from .parsers import get_report_parser


def _is_readable_report(report_path: Path) -> bool:
    """Missing and zero-length reports are skipped without a failure."""
    return report_path.is_file() and report_path.stat().st_size > 0


class ReportReader:
    """Turns native analyzer reports into ResultIndex entries."""

    def __init__(self, index: ResultIndex, ledger: FailureLedger):
        self.index = index
        self.ledger = ledger

    def _parse(self, tool: ToolKind, seed_folder: Path, report_path: Path) -> list[Violation] | None:
        logger.debug(f"{tool.display_name} Detection Result FileName: {report_path}")
        parser = get_report_parser(tool)
        try:
            return parser(report_path, seed_folder)
        except (ReportFormatError, OSError) as e:
            logger.debug(f"Failed to parse {tool.display_name} report {report_path}: {e}")
            self.ledger.record_report_failure(str(report_path))
            return None

    def read_result_file(
        self, tool: ToolKind, seed_folder: Path | str, report_path: Path | str
    ) -> list[Report]:
        """Parse a report covering many files and merge every file's findings.

        Returns the per-file reports that were merged, in first-seen order.
        """
        report_path = Path(report_path)
        if not _is_readable_report(report_path):
            return []

        violations = self._parse(tool, Path(seed_folder), report_path)
        if violations is None:
            logger.debug(f"No results container in {tool.display_name} report: {report_path}")
            return []

        path2report: dict[str, Report] = {}
        for violation in violations:
            report = path2report.get(violation.path)
            if report is None:
                report = path2report[violation.path] = Report(violation.path, tool)
            report.add_violation(violation)

        for report in path2report.values():
            self.index.merge(report)
        return list(path2report.values())

    def read_single_result_file(
        self, tool: ToolKind, seed_file: Path | str, report_path: Path | str
    ) -> Report | None:
        """Parse a report produced for exactly one seed file.

        Raises DuplicateSeedRegistrationError if the seed was already
        registered in this run.
        """
        report_path = Path(report_path)
        if not _is_readable_report(report_path):
            return None

        seed = Path(seed_file).absolute()
        seed_path = str(seed)
        if self.index.is_registered(seed_path):
            logger.critical(f"Repeat process: {seed_path}, report: {report_path}")
            raise DuplicateSeedRegistrationError(seed_path, str(report_path))

        violations = self._parse(tool, seed.parent, report_path)
        if violations is None:
            return None

        report = Report(seed_path, tool)
        for violation in violations:
            if violation.path != seed_path:
                logger.debug(f"Seed Path: {seed_path}, File Path: {violation.path}")
            report.add_violation(
                Violation(seed_path, violation.line, violation.bug_type, violation.tool)
            )

        self.index.register(report, str(report_path))
        return report
