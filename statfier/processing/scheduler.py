"""Run orchestration: mutate seeds, invoke an analyzer in parallel, merge reports."""

import multiprocessing as mp
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from tqdm import tqdm

from ..analyzers.base import AnalyzerAdapter
from ..analyzers.tools import create_adapter
from ..config import AnalyzerSettings, Settings
from ..models import ToolKind
from ..mutation.engine import MutationEngine, is_mutant, remove_mutants_of
from ..oracle import DifferentialOracle, Inconsistency
from ..reports.reader import ReportReader
from ..results import FailureLedger, ResultIndex
from ..source.java_parser import JAVA_EXTENSION


class CancellationToken:
    """Cooperative stop flag checked before each invocation starts."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class InvocationTask:
    """One analyzer run over one seed folder."""

    seed_folder: Path
    report_path: Path


@dataclass
class InvocationResult:
    """Outcome of one invocation task."""

    task: InvocationTask
    launched: bool
    skipped: bool = False
    elapsed: float = 0.0


@dataclass
class RunSummary:
    """End-of-run statistics handed back to the caller."""

    tool: ToolKind
    seed_folders: int = 0
    seeds: int = 0
    mutants: int = 0
    invocations: int = 0
    launched: int = 0
    skipped: int = 0
    files_with_violations: int = 0
    total_violations: int = 0
    failed_report_paths: list[str] = field(default_factory=list)
    failed_tool_executions: list[str] = field(default_factory=list)
    inconsistencies: list[Inconsistency] = field(default_factory=list)
    elapsed: float = 0.0


def enumerate_seed_folders(seed_path: Path) -> list[Path]:
    """Sorted sub-folders of the seed path, or the path itself if it has none."""
    seed_path = Path(seed_path).absolute()
    if not seed_path.is_dir():
        return []
    folders = sorted(p for p in seed_path.iterdir() if p.is_dir() and not p.name.startswith("."))
    return folders or [seed_path]


def enumerate_seeds(seed_folder: Path) -> list[Path]:
    """Original (non-mutant) Java files under a seed folder."""
    return [
        p for p in sorted(seed_folder.rglob(f"*{JAVA_EXTENSION}")) if not is_mutant(p)
    ]


def enumerate_mutants(seed_folder: Path) -> list[Path]:
    return [p for p in sorted(seed_folder.rglob(f"*{JAVA_EXTENSION}")) if is_mutant(p)]


class Scheduler:
    """Drives one analyzer over a seed corpus.

    The scheduler owns its ResultIndex and FailureLedger; call ``reset()``
    before reusing it for an independent run.
    """

    def __init__(
        self,
        settings: Settings,
        engine: MutationEngine | None = None,
        cancel_token: CancellationToken | None = None,
    ):
        self.settings = settings
        self.engine = engine or MutationEngine()
        self.cancel_token = cancel_token or CancellationToken()

        if settings.max_workers is None:
            # Invocations are I/O-bound waits on child processes
            self.max_workers = max(1, mp.cpu_count())
        else:
            self.max_workers = max(1, settings.max_workers)

        self.index = ResultIndex()
        self.ledger = FailureLedger()
        self.reader = ReportReader(self.index, self.ledger)

    def reset(self) -> None:
        """Start a fresh ResultIndex and FailureLedger."""
        self.index = ResultIndex()
        self.ledger = FailureLedger()
        self.reader = ReportReader(self.index, self.ledger)

    def create_adapter(self, analyzer: AnalyzerSettings) -> AnalyzerAdapter:
        return create_adapter(analyzer, self.ledger, self.settings.timeout)

    def run(self) -> RunSummary:
        """Execute the enabled analyzer end to end.

        Raises NoAnalyzerEnabledError before doing any work when the
        configuration enables no analyzer.
        """
        analyzer = self.settings.selected_analyzer()
        return self.execute(analyzer.tool, self.settings.seed_path)

    def execute(self, tool: ToolKind, seed_path: Path | str) -> RunSummary:
        """Mutate, invoke and parse for one analyzer over a seed path."""
        start_time = time.time()
        adapter = self.create_adapter(self.settings.analyzers[tool])
        summary = RunSummary(tool=tool)
        logger.info(f"Starting {tool.display_name} analysis of {seed_path}")

        seed_folders = enumerate_seed_folders(Path(seed_path))
        summary.seed_folders = len(seed_folders)
        if not seed_folders:
            logger.warning(f"No seed folders found under {seed_path}")

        if self.settings.mutation:
            summary.seeds, summary.mutants = self.mutate_seeds(seed_folders)
        else:
            summary.seeds = sum(len(enumerate_seeds(f)) for f in seed_folders)

        results_dir = Path(self.settings.results_dir).absolute() / tool.value
        tasks = [
            InvocationTask(folder, adapter.report_path_for(results_dir, folder))
            for folder in seed_folders
        ]
        results = self.invoke_all(adapter, tasks)
        summary.invocations = len(results)
        summary.launched = sum(1 for r in results if r.launched)
        summary.skipped = sum(1 for r in results if r.skipped)

        # Report parsing and index updates stay on this thread
        for result in tqdm(results, desc="Parsing reports", disable=not results):
            if result.skipped:
                continue
            self.reader.read_result_file(tool, result.task.seed_folder, result.task.report_path)

        mutant_paths = [str(m) for folder in seed_folders for m in enumerate_mutants(folder)]
        summary.inconsistencies = DifferentialOracle(self.index).find_inconsistencies(mutant_paths)

        summary.files_with_violations = len(self.index)
        summary.total_violations = self.index.total_violations()
        summary.failed_report_paths = self.ledger.failed_report_paths
        summary.failed_tool_executions = self.ledger.failed_tool_executions
        summary.elapsed = time.time() - start_time
        logger.info(
            f"{tool.display_name} analysis finished in {summary.elapsed:.2f}s: "
            f"{summary.total_violations} violations in {summary.files_with_violations} files"
        )
        return summary

    def mutate_seeds(self, seed_folders: list[Path]) -> tuple[int, int]:
        """Regenerate mutants for every seed; returns (seeds, mutants)."""
        seeds = [seed for folder in seed_folders for seed in enumerate_seeds(folder)]
        mutant_count = 0
        for seed in tqdm(seeds, desc="Generating mutants", disable=not seeds):
            if self.cancel_token.cancelled:
                logger.warning("Cancelled during mutation")
                break
            try:
                if self.settings.cleanup_mutants:
                    remove_mutants_of(seed)
                mutant_count += len(self.engine.apply_applicable_transforms(seed))
            except Exception as e:
                logger.error(f"Error mutating {seed}: {e}")
        logger.info(f"Generated {mutant_count} mutants from {len(seeds)} seeds")
        return len(seeds), mutant_count

    def invoke_all(
        self, adapter: AnalyzerAdapter, tasks: list[InvocationTask]
    ) -> list[InvocationResult]:
        """Run every task on the bounded pool and wait for all of them."""
        if not tasks:
            return []

        logger.info(
            f"Invoking {adapter.tool.display_name} on {len(tasks)} seed folders "
            f"with {self.max_workers} workers"
        )
        results: list[InvocationResult] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_task = {
                executor.submit(self._invoke_one, adapter, task): task for task in tasks
            }
            with tqdm(total=len(tasks), desc=f"Running {adapter.tool.display_name}") as pbar:
                for future in as_completed(future_to_task):
                    results.append(future.result())
                    pbar.update(1)

        # Keep task order so parsing is deterministic
        order = {id(task): i for i, task in enumerate(tasks)}
        results.sort(key=lambda r: order[id(r.task)])
        return results

    def _invoke_one(self, adapter: AnalyzerAdapter, task: InvocationTask) -> InvocationResult:
        if self.cancel_token.cancelled:
            return InvocationResult(task=task, launched=False, skipped=True)
        start = time.time()
        try:
            launched = adapter.invoke(task.seed_folder, task.report_path)
        except Exception as e:
            logger.error(f"Worker error invoking {adapter.tool.display_name} on {task.seed_folder}: {e}")
            self.ledger.record_tool_failure(f"{adapter.tool.value}: {task.seed_folder}")
            launched = False
        return InvocationResult(task=task, launched=launched, elapsed=time.time() - start)
