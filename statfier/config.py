"""Run configuration loaded from YAML, TOML or Java properties files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import toml
import yaml
from loguru import logger

from .exceptions import ConfigurationError, NoAnalyzerEnabledError
from .models import ToolKind

SUPPORTED_FORMATS = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".properties": "properties",
}

_TRUE_VALUES = {"true", "yes", "on", "1"}

# Tool-specific keys and their defaults; any `<TOOL>_<KEY>` entry lands in options
DEFAULT_OPTIONS: dict[ToolKind, dict[str, str]] = {
    ToolKind.PMD: {"ruleset": "category/java/bestpractices.xml"},
    ToolKind.SPOTBUGS: {"javac": "javac"},
    ToolKind.CHECKSTYLE: {"config": "/google_checks.xml", "java": "java"},
    ToolKind.INFER: {"javac": "javac"},
    ToolKind.SONARQUBE: {"host": "http://localhost:9000", "token": "", "curl": "curl"},
    ToolKind.CODENAVI: {"checker_dir": "", "java": "java"},
}

DEFAULT_EXECUTABLES: dict[ToolKind, str] = {
    ToolKind.PMD: "pmd",
    ToolKind.SPOTBUGS: "spotbugs",
    ToolKind.CHECKSTYLE: "checkstyle.jar",
    ToolKind.INFER: "infer",
    ToolKind.SONARQUBE: "sonar-scanner",
    ToolKind.CODENAVI: "",
}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


@dataclass
class AnalyzerSettings:
    """Enable flag, executable location and tool options for one analyzer."""

    tool: ToolKind
    enabled: bool = False
    path: str = ""
    options: dict[str, str] = field(default_factory=dict)

    def option(self, key: str) -> str:
        return self.options.get(key, DEFAULT_OPTIONS[self.tool].get(key, ""))

    @property
    def executable(self) -> str:
        return self.path or DEFAULT_EXECUTABLES[self.tool]


@dataclass
class Settings:
    """Everything one Statfier run needs to know."""

    seed_path: Path = Path("seeds")
    results_dir: Path = Path("results")
    analyzers: dict[ToolKind, AnalyzerSettings] = field(default_factory=dict)
    mutation: bool = True
    cleanup_mutants: bool = True
    max_workers: int | None = None
    timeout: float | None = None
    debug: bool = False

    def __post_init__(self):
        for tool in ToolKind:
            self.analyzers.setdefault(tool, AnalyzerSettings(tool))

    def enabled_analyzers(self) -> list[AnalyzerSettings]:
        return [self.analyzers[tool] for tool in ToolKind if self.analyzers[tool].enabled]

    def selected_analyzer(self) -> AnalyzerSettings:
        """The single analyzer this run drives.

        Raises NoAnalyzerEnabledError when none is enabled; when several
        are, the first in ToolKind order wins.
        """
        enabled = self.enabled_analyzers()
        if not enabled:
            raise NoAnalyzerEnabledError(
                "No static analyzer is enabled. Set one of the *_MUTATION flags to true."
            )
        if len(enabled) > 1:
            names = ", ".join(a.tool.display_name for a in enabled)
            logger.warning(f"Several analyzers enabled ({names}); using {enabled[0].tool.display_name}")
        return enabled[0]


def _parse_properties(content: str) -> dict[str, str]:
    """Parse a Java-style properties file."""
    data = {}
    lines = content.split("\n")
    index = 0
    while index < len(lines):
        line = lines[index].strip()
        index += 1
        if not line or line.startswith("#") or line.startswith("!"):
            continue

        # Multi-line values end with a backslash
        while line.endswith("\\") and index < len(lines):
            line = line[:-1] + lines[index].strip()
            index += 1

        if "=" in line:
            key, value = line.split("=", 1)
        elif ":" in line:
            key, value = line.split(":", 1)
        else:
            continue
        data[key.strip()] = value.strip()
    return data


def _flatten(raw: dict[str, Any]) -> dict[str, Any]:
    """Map nested ``analyzers:`` tables onto flat ``<TOOL>_<KEY>`` keys."""
    flat = {}
    for key, value in raw.items():
        if key.lower() == "analyzers" and isinstance(value, dict):
            for tool_name, tool_table in value.items():
                if not isinstance(tool_table, dict):
                    continue
                for sub_key, sub_value in tool_table.items():
                    if sub_key.lower() == "enabled":
                        sub_key = "mutation"
                    flat[f"{tool_name}_{sub_key}".upper()] = sub_value
        else:
            flat[key.upper()] = value
    return flat


def settings_from_mapping(raw: dict[str, Any]) -> Settings:
    """Build Settings from an already-parsed configuration mapping."""
    data = _flatten(raw)
    settings = Settings()

    if "SEED_PATH" in data:
        settings.seed_path = Path(str(data["SEED_PATH"]))
    if "RESULTS_DIR" in data:
        settings.results_dir = Path(str(data["RESULTS_DIR"]))
    if "MUTATION" in data:
        settings.mutation = parse_bool(data["MUTATION"])
    if "CLEANUP_MUTANTS" in data:
        settings.cleanup_mutants = parse_bool(data["CLEANUP_MUTANTS"])
    if "DEBUG" in data:
        settings.debug = parse_bool(data["DEBUG"])
    try:
        if data.get("MAX_WORKERS") not in (None, ""):
            settings.max_workers = int(data["MAX_WORKERS"])
        if data.get("TIMEOUT") not in (None, ""):
            settings.timeout = float(data["TIMEOUT"])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e

    for tool in ToolKind:
        prefix = tool.name + "_"
        analyzer = settings.analyzers[tool]
        for key, value in data.items():
            if not key.startswith(prefix):
                continue
            sub_key = key[len(prefix):]
            if sub_key == "MUTATION":
                analyzer.enabled = parse_bool(value)
            elif sub_key == "PATH":
                analyzer.path = str(value)
            else:
                analyzer.options[sub_key.lower()] = str(value)

    return settings


def load_settings(config_path: Path | str) -> Settings:
    """Load Settings from a YAML, TOML or properties file."""
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    format_type = SUPPORTED_FORMATS.get(path.suffix.lower())
    if not format_type:
        raise ConfigurationError(f"Unknown configuration file format: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        if format_type == "yaml":
            raw = yaml.safe_load(content) or {}
        elif format_type == "toml":
            raw = toml.loads(content)
        else:
            raw = _parse_properties(content)
    except (OSError, yaml.YAMLError, toml.TomlDecodeError) as e:
        raise ConfigurationError(f"Failed to parse {format_type} file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")

    logger.debug(f"Loaded {format_type} configuration from {path}")
    return settings_from_mapping(raw)
