"""Per-analyzer command lines."""

from pathlib import Path

from ..config import AnalyzerSettings
from ..models import ToolKind
from ..results import FailureLedger
from .base import AnalyzerAdapter, java_sources, script_launcher


class PMDAdapter(AnalyzerAdapter):
    tool = ToolKind.PMD
    report_suffix = ".json"

    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        return [
            [
                script_launcher(self.settings.executable),
                "check",
                "-d", str(seed_folder),
                "-R", self.settings.option("ruleset"),
                "-f", "json",
                "-r", str(report_path),
                "--no-cache",
            ]
        ]


class SpotBugsAdapter(AnalyzerAdapter):
    """SpotBugs works on bytecode, so sources are compiled first."""

    tool = ToolKind.SPOTBUGS
    report_suffix = ".xml"

    def classes_dir(self, report_path: Path) -> Path:
        return report_path.with_name(report_path.stem + "_classes")

    def prepare(self, seed_folder: Path, report_path: Path) -> None:
        super().prepare(seed_folder, report_path)
        self.classes_dir(report_path).mkdir(parents=True, exist_ok=True)

    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        classes = str(self.classes_dir(report_path))
        return [
            [self.settings.option("javac"), "-g", "-d", classes, *java_sources(seed_folder)],
            [
                script_launcher(self.settings.executable),
                "-textui",
                "-xml:withMessages",
                "-sourcepath", str(seed_folder),
                "-output", str(report_path),
                classes,
            ],
        ]


class CheckStyleAdapter(AnalyzerAdapter):
    tool = ToolKind.CHECKSTYLE
    report_suffix = ".xml"

    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        return [
            [
                self.settings.option("java"),
                "-jar", self.settings.executable,
                "-c", self.settings.option("config"),
                "-f", "xml",
                "-o", str(report_path),
                str(seed_folder),
            ]
        ]


class InferAdapter(AnalyzerAdapter):
    """Infer captures a javac build and writes report.json into its results dir."""

    tool = ToolKind.INFER
    report_suffix = ".json"

    def report_path_for(self, results_dir: Path, seed_folder: Path) -> Path:
        return results_dir / seed_folder.name / "report.json"

    def classes_dir(self, report_path: Path) -> Path:
        return report_path.parent.with_name(report_path.parent.name + "_classes")

    def prepare(self, seed_folder: Path, report_path: Path) -> None:
        super().prepare(seed_folder, report_path)
        self.classes_dir(report_path).mkdir(parents=True, exist_ok=True)

    def working_directory(self, seed_folder: Path) -> Path | None:
        # report.json paths are relative to the capture directory
        return seed_folder

    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        return [
            [
                self.settings.executable,
                "run",
                "-o", str(report_path.parent),
                "--",
                self.settings.option("javac"),
                "-d", str(self.classes_dir(report_path)),
                *java_sources(seed_folder),
            ]
        ]


class SonarQubeAdapter(AnalyzerAdapter):
    """Scan into a SonarQube server, then download the project's issues."""

    tool = ToolKind.SONARQUBE
    report_suffix = ".json"

    @staticmethod
    def project_key(seed_folder: Path) -> str:
        return f"statfier_{seed_folder.name}"

    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        key = self.project_key(seed_folder)
        host = self.settings.option("host").rstrip("/")
        token = self.settings.option("token")

        scan = [
            script_launcher(self.settings.executable),
            f"-Dsonar.projectKey={key}",
            f"-Dsonar.projectBaseDir={seed_folder}",
            "-Dsonar.sources=.",
            "-Dsonar.java.binaries=.",
            f"-Dsonar.host.url={host}",
            "-Dsonar.qualitygate.wait=true",
        ]
        fetch = [self.settings.option("curl"), "-s", "-o", str(report_path)]
        if token:
            scan.append(f"-Dsonar.token={token}")
            fetch.extend(["-u", f"{token}:"])
        fetch.append(f"{host}/api/issues/search?componentKeys={key}&ps=500")
        return [scan, fetch]


class CodeNaviAdapter(AnalyzerAdapter):
    tool = ToolKind.CODENAVI
    report_suffix = ".xml"

    def build_commands(self, seed_folder: Path, report_path: Path) -> list[list[str]]:
        return [
            [
                self.settings.option("java"),
                "-Dfile.encoding=UTF-8",
                "--add-opens=java.base/java.lang.reflect=ALL-UNNAMED",
                "--enable-preview",
                "-cp", self.settings.executable,
                "com.huawei.secbrella.kirin.Main",
                "--pugin",
                "--language", "java",
                "--outputFormat", "xml",
                "--dir", str(seed_folder),
                "--checkerDir", self.settings.option("checker_dir"),
                "--output", str(report_path),
            ]
        ]


ADAPTERS: dict[ToolKind, type[AnalyzerAdapter]] = {
    ToolKind.PMD: PMDAdapter,
    ToolKind.SPOTBUGS: SpotBugsAdapter,
    ToolKind.CHECKSTYLE: CheckStyleAdapter,
    ToolKind.INFER: InferAdapter,
    ToolKind.SONARQUBE: SonarQubeAdapter,
    ToolKind.CODENAVI: CodeNaviAdapter,
}


def create_adapter(
    settings: AnalyzerSettings, ledger: FailureLedger, timeout: float | None = None
) -> AnalyzerAdapter:
    """Instantiate the adapter matching the analyzer settings."""
    return ADAPTERS[settings.tool](settings, ledger, timeout)
