"""Statfier: metamorphic testing of static analyzers."""

from .config import AnalyzerSettings, Settings, load_settings
from .models import Mutant, MutationSite, Report, ToolKind, Violation
from .mutation import MutationEngine, cleanup_mutants
from .processing import RunSummary, Scheduler
from .results import FailureLedger, ResultIndex
from .transforms import TransformCatalog

__version__ = "0.1.0"

__all__ = [
    "AnalyzerSettings",
    "FailureLedger",
    "Mutant",
    "MutationEngine",
    "MutationSite",
    "Report",
    "ResultIndex",
    "RunSummary",
    "Scheduler",
    "Settings",
    "ToolKind",
    "TransformCatalog",
    "Violation",
    "cleanup_mutants",
    "load_settings",
]
