"""Shared data model: tools, violations, reports and mutation records."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

UNKNOWN_LINE = -1
UNKNOWN_BUG_TYPE = "UNKNOWN"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


class ToolKind(str, Enum):
    """Static analyzers Statfier knows how to drive."""

    PMD = "pmd"
    SPOTBUGS = "spotbugs"
    CHECKSTYLE = "checkstyle"
    INFER = "infer"
    SONARQUBE = "sonarqube"
    CODENAVI = "codenavi"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ToolKind.PMD: "PMD",
    ToolKind.SPOTBUGS: "SpotBugs",
    ToolKind.CHECKSTYLE: "CheckStyle",
    ToolKind.INFER: "Infer",
    ToolKind.SONARQUBE: "SonarQube",
    ToolKind.CODENAVI: "CodeNavi",
}


def parse_line(raw: object) -> int:
    """Parse a reported line number, falling back to UNKNOWN_LINE."""
    if raw is None:
        return UNKNOWN_LINE
    if isinstance(raw, bool):
        return UNKNOWN_LINE
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    # ASCII digits only, within a Java int; "1_0" and non-ASCII digits are rejected
    if not _INT_PATTERN.fullmatch(text):
        return UNKNOWN_LINE
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        return UNKNOWN_LINE
    return value


@dataclass(frozen=True)
class Violation:
    """One normalized analyzer finding."""

    path: str
    line: int
    bug_type: str
    tool: ToolKind

    @classmethod
    def create(
        cls, path: str, line: object, bug_type: str | None, tool: ToolKind
    ) -> "Violation":
        """Build a violation, normalizing the line and bug type."""
        return cls(
            path=path,
            line=parse_line(line),
            bug_type=bug_type or UNKNOWN_BUG_TYPE,
            tool=tool,
        )

    def __str__(self) -> str:
        return f"[{self.tool.display_name}] {self.bug_type} at line {self.line}"


@dataclass
class Report:
    """Ordered violations reported for one file by one analyzer run."""

    file_path: str
    tool: ToolKind
    violations: list[Violation] = field(default_factory=list)

    def add_violation(self, violation: Violation) -> None:
        self.violations.append(violation)

    def __len__(self) -> int:
        return len(self.violations)

    def __str__(self) -> str:
        lines = [f"{self.tool.display_name} Report: {self.file_path}"]
        lines.extend(str(v) for v in self.violations)
        return "\n".join(lines)


@dataclass(frozen=True)
class MutationSite:
    """A node in a source unit that one transform may rewrite."""

    transform_name: str
    node_type: str
    start_byte: int
    end_byte: int
    line: int

    def __str__(self) -> str:
        return f"{self.transform_name}@{self.node_type}:{self.line}"


@dataclass(frozen=True)
class Mutant:
    """A mutant written to disk."""

    path: Path
    seed_path: Path
    transform_name: str
    site: MutationSite
    iteration: int
