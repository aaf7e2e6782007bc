"""Exception hierarchy for Statfier."""


class StatfierError(Exception):
    """Base class for all Statfier errors."""


class ConfigurationError(StatfierError):
    """Raised when a configuration file cannot be loaded or is invalid."""


class NoAnalyzerEnabledError(ConfigurationError):
    """Raised when the configuration enables no static analyzer."""


class TransformNotFoundError(StatfierError, KeyError):
    """Raised when a transform name is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Transform not found: {self.name}"


class SourceParseError(StatfierError):
    """Raised when a source file cannot be read or parsed."""


class ReportFormatError(StatfierError):
    """Raised when a native analyzer report is malformed."""


class DuplicateSeedRegistrationError(StatfierError):
    """Raised when a seed is registered twice in one single-file scan.

    Double registration would double-count violations and corrupt every
    later comparison, so it is fatal for the run.
    """

    def __init__(self, seed_path: str, report_path: str):
        super().__init__(f"Repeat process: {seed_path} (report: {report_path})")
        self.seed_path = seed_path
        self.report_path = report_path
