"""Command-line entry points."""

import argparse
import sys
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigurationError, DuplicateSeedRegistrationError
from .logging_setup import configure_logging
from .mutation.engine import MutationEngine
from .processing.scheduler import RunSummary, Scheduler

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statfier",
        description="Metamorphic testing of static analyzers with semantics-preserving mutants.",
    )
    parser.add_argument("--config", required=True, help="YAML, TOML or .properties configuration file")
    parser.add_argument("--seed-path", help="Override the seed directory")
    parser.add_argument("--results-dir", help="Override the report output directory")
    parser.add_argument("--workers", type=int, help="Maximum concurrent analyzer invocations")
    parser.add_argument("--timeout", type=float, help="Per-invocation timeout in seconds")
    parser.add_argument("--no-mutation", action="store_true", help="Analyze existing files only")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write debug logs to this file")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.seed_path:
        settings.seed_path = Path(args.seed_path)
    if args.results_dir:
        settings.results_dir = Path(args.results_dir)
    if args.workers is not None:
        settings.max_workers = args.workers
    if args.timeout is not None:
        settings.timeout = args.timeout
    if args.no_mutation:
        settings.mutation = False
    if args.debug:
        settings.debug = True
    return settings


def print_summary(summary: RunSummary) -> None:
    """Render the end-of-run summary."""
    table = Table(title=f"{summary.tool.display_name} run summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Seed folders", str(summary.seed_folders))
    table.add_row("Seeds", str(summary.seeds))
    table.add_row("Mutants generated", str(summary.mutants))
    table.add_row("Invocations launched", f"{summary.launched}/{summary.invocations}")
    table.add_row("Files with violations", str(summary.files_with_violations))
    table.add_row("Total violations", str(summary.total_violations))
    table.add_row("Inconsistencies", str(len(summary.inconsistencies)))
    table.add_row("Elapsed", f"{summary.elapsed:.2f}s")
    console.print(table)

    if summary.inconsistencies:
        detail = Table(title="Inconsistencies")
        detail.add_column("Mutant")
        detail.add_column("Bug type")
        detail.add_column("Seed", justify="right")
        detail.add_column("Mutant", justify="right")
        detail.add_column("Kind")
        for item in summary.inconsistencies:
            detail.add_row(
                Path(item.mutant_path).name,
                item.bug_type,
                str(item.seed_count),
                str(item.mutant_count),
                item.kind,
            )
        console.print(detail)

    if summary.failed_report_paths:
        console.print("[bold red]Failed report paths:[/bold red]")
        for path in summary.failed_report_paths:
            console.print(f"  {path}")
    if summary.failed_tool_executions:
        console.print("[bold red]Failed tool executions:[/bold red]")
        for command in summary.failed_tool_executions:
            console.print(f"  {command}")


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``statfier``."""
    args = build_parser().parse_args(argv)
    configure_logging(args.debug, args.log_file)

    try:
        settings = apply_overrides(load_settings(args.config), args)
        configure_logging(settings.debug, args.log_file)
        scheduler = Scheduler(settings)
        summary = scheduler.run()
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except DuplicateSeedRegistrationError as e:
        logger.critical(str(e))
        return 1

    print_summary(summary)
    console.print("Analysis completed successfully.")
    return 0


def mutate_main(argv: list[str] | None = None) -> int:
    """Entry point for ``statfier-mutate <file_path> [transform_name]``."""
    args = sys.argv[1:] if argv is None else argv
    engine = MutationEngine()

    if not args:
        print("Usage: statfier-mutate <file_path> [transform_name]", file=sys.stderr)
        print("  file_path: Path to the Java file to transform", file=sys.stderr)
        print("  transform_name: Optional specific transform name", file=sys.stderr)
        print("Available transforms:", file=sys.stderr)
        for name in engine.catalog.names():
            print(f"  - {name}", file=sys.stderr)
        return 1

    configure_logging()
    file_path = args[0]
    if len(args) > 1:
        mutant_paths = engine.apply_transform(file_path, args[1])
    else:
        mutant_paths = engine.apply_applicable_transforms(file_path)

    print(f"Generated {len(mutant_paths)} mutants:")
    for path in mutant_paths:
        print(f"  {path}")
    return 0


def run() -> None:
    sys.exit(main())


def run_mutate() -> None:
    sys.exit(mutate_main())


if __name__ == "__main__":
    run()
