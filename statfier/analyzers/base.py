"""Launching external analyzers as child processes."""

import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from ..config import AnalyzerSettings
from ..models import ToolKind
from ..results import FailureLedger
from ..source.java_parser import JAVA_EXTENSION


def is_windows() -> bool:
    return os.name == "nt"


def script_launcher(name: str) -> str:
    """Resolve a shell-script launcher for the host OS.

    Tools such as PMD and SpotBugs ship ``.bat`` launchers on Windows and
    extension-less scripts elsewhere.
    """
    if is_windows() and not Path(name).suffix:
        return name + ".bat"
    return name


def format_command(command: list[str]) -> str:
    return shlex.join(command)


def run_command(
    command: list[str], timeout: float | None = None, cwd: Path | None = None
) -> bool:
    """Run one argument vector; True unless the process failed to launch.

    A non-zero exit status is still a successful launch: analyzers use exit
    codes to signal that they found violations.
    """
    logger.debug(f"Running: {format_command(command)}")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            timeout=timeout,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except subprocess.TimeoutExpired:
        logger.error(f"Timed out after {timeout}s: {format_command(command)}")
        return False
    except OSError as e:
        logger.error(f"Failed to launch {command[0]}: {e}")
        return False

    if result.returncode < 0:
        logger.error(f"Killed by signal {-result.returncode}: {format_command(command)}")
        return False
    if result.returncode != 0:
        logger.debug(f"{command[0]} exited with {result.returncode}: {result.stderr.strip()[:500]}")
    return True


def java_sources(seed_folder: Path) -> list[str]:
    return [str(p) for p in sorted(seed_folder.rglob(f"*{JAVA_EXTENSION}"))]


class AnalyzerAdapter(ABC):
    """Runs one analyzer over a seed folder and leaves its native report on disk.

    Adapters never look at findings; they only report whether every process
    launched.
    """

    tool: ToolKind
    report_suffix = ".json"

    def __init__(
        self,
        settings: AnalyzerSettings,
        ledger: FailureLedger,
        timeout: float | None = None,
    ):
        self.settings = settings
        self.ledger = ledger
        self.timeout = timeout

    def report_path_for(self, results_dir: Path, seed_folder: Path) -> Path:
        """Where the native report for a seed folder is written."""
        return results_dir / f"{seed_folder.name}{self.report_suffix}"

    @abstractmethod
    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        """Argument vectors to run in order."""

    def working_directory(self, seed_folder: Path) -> Path | None:
        return None

    def prepare(self, seed_folder: Path, report_path: Path) -> None:
        """Create output directories and drop any stale report."""
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.unlink(missing_ok=True)

    def invoke(self, seed_folder: Path | str, report_path: Path | str) -> bool:
        """Run the analyzer; False only if a process could not be launched."""
        seed_folder = Path(seed_folder).absolute()
        report_path = Path(report_path).absolute()
        logger.debug(f"{self.tool.display_name} seed path: {seed_folder}")
        logger.debug(f"{self.tool.display_name} report output path: {report_path}")

        try:
            self.prepare(seed_folder, report_path)
        except OSError as e:
            logger.error(f"Cannot prepare output for {seed_folder}: {e}")
            self.ledger.record_tool_failure(f"{self.tool.value}: prepare {report_path}")
            return False

        cwd = self.working_directory(seed_folder)
        for command in self.build_commands(seed_folder, report_path):
            if not run_command(command, timeout=self.timeout, cwd=cwd):
                self.ledger.record_tool_failure(format_command(command))
                return False
        return True
