"""External analyzer adapters."""

from .base import AnalyzerAdapter, run_command, script_launcher
from .tools import (
    ADAPTERS,
    CheckStyleAdapter,
    CodeNaviAdapter,
    InferAdapter,
    PMDAdapter,
    SonarQubeAdapter,
    SpotBugsAdapter,
    create_adapter,
)

__all__ = [
    "ADAPTERS",
    "AnalyzerAdapter",
    "CheckStyleAdapter",
    "CodeNaviAdapter",
    "InferAdapter",
    "PMDAdapter",
    "SonarQubeAdapter",
    "SpotBugsAdapter",
    "create_adapter",
    "run_command",
    "script_launcher",
]
