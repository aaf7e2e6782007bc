"""Native report parsers, one function per analyzer.

Every parser returns the report's violations in document order, or None
when the document is well-formed but has no results container. Malformed
documents raise ReportFormatError.
"""

import json
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..exceptions import ReportFormatError
from ..models import ToolKind, Violation

CODENAVI_BUG_TYPE = "CODENAVI_DEFECT"

ReportParserFn = Callable[[Path, Path], list[Violation] | None]


def _load_xml(report_path: Path) -> ET.Element:
    try:
        return ET.parse(report_path).getroot()
    except ET.ParseError as e:
        raise ReportFormatError(f"Malformed XML in {report_path}: {e}") from e


def _load_json(report_path: Path) -> Any:
    try:
        with open(report_path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ReportFormatError(f"Malformed JSON in {report_path}: {e}") from e


def _text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _resolve_path(name: str, seed_folder: Path) -> str:
    """Make a reported file name absolute relative to the scanned folder."""
    path = Path(name)
    if path.is_absolute():
        return str(path)
    candidate = seed_folder / path
    if not candidate.exists() and (seed_folder / path.name).exists():
        candidate = seed_folder / path.name
    return str(candidate.absolute())


def parse_codenavi_report(report_path: Path, seed_folder: Path) -> list[Violation] | None:
    """Parse ``<r><errors><error><defectInfo>`` CodeNavi XML."""
    root = _load_xml(report_path)
    errors = root.find("errors")
    if errors is None:
        return None

    violations = []
    for error in errors.findall("error"):
        defect_info = error.find("defectInfo")
        if defect_info is None:
            continue
        file_name = _text(defect_info.find("fileName"))
        if not file_name:
            continue
        line_element = defect_info.find("reportLine")
        violations.append(
            Violation.create(
                path=file_name,
                line=line_element.text if line_element is not None else None,
                bug_type=CODENAVI_BUG_TYPE,
                tool=ToolKind.CODENAVI,
            )
        )
    return violations


def parse_pmd_report(report_path: Path, seed_folder: Path) -> list[Violation] | None:
    """Parse PMD's JSON renderer output."""
    data = _load_json(report_path)
    if not isinstance(data, dict) or "files" not in data:
        return None
    files = data["files"]
    if not isinstance(files, list):
        raise ReportFormatError(f"'files' is not a list in {report_path}")

    violations = []
    for entry in files:
        if not isinstance(entry, dict):
            continue
        file_name = str(entry.get("filename") or "").strip()
        if not file_name:
            continue
        path = _resolve_path(file_name, seed_folder)
        for item in entry.get("violations") or []:
            if not isinstance(item, dict):
                continue
            violations.append(
                Violation.create(path, item.get("beginline"), item.get("rule"), ToolKind.PMD)
            )
    return violations


def parse_spotbugs_report(report_path: Path, seed_folder: Path) -> list[Violation] | None:
    """Parse SpotBugs ``-xml:withMessages`` output."""
    root = _load_xml(report_path)
    if root.tag != "BugCollection":
        return None

    violations = []
    for bug in root.findall("BugInstance"):
        source_line = bug.find("SourceLine")
        if source_line is None:
            continue
        file_name = (source_line.get("sourcepath") or source_line.get("sourcefile") or "").strip()
        if not file_name:
            continue
        violations.append(
            Violation.create(
                _resolve_path(file_name, seed_folder),
                source_line.get("start"),
                bug.get("type"),
                ToolKind.SPOTBUGS,
            )
        )
    return violations


def parse_checkstyle_report(report_path: Path, seed_folder: Path) -> list[Violation] | None:
    """Parse CheckStyle's XML formatter output."""
    root = _load_xml(report_path)
    if root.tag != "checkstyle":
        return None

    violations = []
    for file_element in root.findall("file"):
        file_name = (file_element.get("name") or "").strip()
        if not file_name:
            continue
        path = _resolve_path(file_name, seed_folder)
        for error in file_element.findall("error"):
            source = error.get("source") or ""
            bug_type = source.rsplit(".", 1)[-1] if source else None
            violations.append(
                Violation.create(path, error.get("line"), bug_type, ToolKind.CHECKSTYLE)
            )
    return violations


def parse_infer_report(report_path: Path, seed_folder: Path) -> list[Violation] | None:
    """Parse Infer's ``report.json``."""
    data = _load_json(report_path)
    if not isinstance(data, list):
        return None

    violations = []
    for item in data:
        if not isinstance(item, dict):
            continue
        file_name = str(item.get("file") or "").strip()
        if not file_name:
            continue
        violations.append(
            Violation.create(
                _resolve_path(file_name, seed_folder),
                item.get("line"),
                item.get("bug_type"),
                ToolKind.INFER,
            )
        )
    return violations


def parse_sonarqube_report(report_path: Path, seed_folder: Path) -> list[Violation] | None:
    """Parse a SonarQube ``api/issues/search`` response."""
    data = _load_json(report_path)
    if not isinstance(data, dict) or "issues" not in data:
        return None
    issues = data["issues"]
    if not isinstance(issues, list):
        raise ReportFormatError(f"'issues' is not a list in {report_path}")

    violations = []
    for issue in issues:
        if not isinstance(issue, dict):
            continue
        component = str(issue.get("component") or "").strip()
        # Components look like "<projectKey>:<relative path>"
        file_name = component.split(":", 1)[1] if ":" in component else component
        if not file_name:
            continue
        violations.append(
            Violation.create(
                _resolve_path(file_name, seed_folder),
                issue.get("line"),
                issue.get("rule"),
                ToolKind.SONARQUBE,
            )
        )
    return violations


REPORT_PARSERS: dict[ToolKind, ReportParserFn] = {
    ToolKind.PMD: parse_pmd_report,
    ToolKind.SPOTBUGS: parse_spotbugs_report,
    ToolKind.CHECKSTYLE: parse_checkstyle_report,
    ToolKind.INFER: parse_infer_report,
    ToolKind.SONARQUBE: parse_sonarqube_report,
    ToolKind.CODENAVI: parse_codenavi_report,
}


def get_report_parser(tool: ToolKind) -> ReportParserFn:
    return REPORT_PARSERS[tool]
