"""Tests for run orchestration."""

import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from statfier.analyzers import CodeNaviAdapter
from statfier.config import Settings
from statfier.exceptions import NoAnalyzerEnabledError
from statfier.models import ToolKind
from statfier.mutation import is_mutant
from statfier.processing import (
    CancellationToken,
    InvocationTask,
    Scheduler,
    enumerate_mutants,
    enumerate_seed_folders,
    enumerate_seeds,
)
from statfier.reports import CODENAVI_BUG_TYPE


class FakeCodeNavi(CodeNaviAdapter):
    """Writes a CodeNavi report flagging line 3 of every seed and nothing in mutants."""

    render = None

    def __init__(self, *args, delay: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0
        self.calls = 0

    def invoke(self, seed_folder, report_path):
        with self.lock:
            self.active += 1
            self.calls += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delay)
            seed_folder = Path(seed_folder)
            report_path = Path(report_path)
            self.prepare(seed_folder, report_path)
            entries = [
                ("3", str(p)) for p in sorted(seed_folder.rglob("*.java")) if not is_mutant(p)
            ]
            report_path.write_text(self.render(entries), encoding="utf-8")
            return True
        finally:
            with self.lock:
                self.active -= 1


class FakeScheduler(Scheduler):
    def __init__(self, *args, delay: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay
        self.adapter = None

    def create_adapter(self, analyzer):
        self.adapter = FakeCodeNavi(analyzer, self.ledger, self.settings.timeout, delay=self.delay)
        return self.adapter


@pytest.fixture(autouse=True)
def codenavi_renderer(make_codenavi_xml, monkeypatch):
    monkeypatch.setattr(FakeCodeNavi, "render", staticmethod(make_codenavi_xml))


@pytest.fixture
def settings(tmp_path, branches_seed, loops_seed) -> Settings:
    settings = Settings(
        seed_path=tmp_path / "seeds",
        results_dir=tmp_path / "results",
        max_workers=2,
    )
    settings.analyzers[ToolKind.CODENAVI].enabled = True
    return settings


class TestEnumeration:
    """Test seed discovery."""

    def test_seed_folders(self, settings, tmp_path):
        folders = enumerate_seed_folders(settings.seed_path)

        assert [f.name for f in folders] == ["group1", "group2"]

    def test_flat_seed_path(self, branches_seed):
        assert enumerate_seed_folders(branches_seed.parent) == [branches_seed.parent.absolute()]

    def test_missing_seed_path(self, tmp_path):
        assert enumerate_seed_folders(tmp_path / "missing") == []

    def test_seeds_exclude_mutants(self, branches_seed):
        (branches_seed.parent / "Branches_iter1.java").write_text("class X {}")

        assert enumerate_seeds(branches_seed.parent) == [branches_seed]
        assert [p.name for p in enumerate_mutants(branches_seed.parent)] == ["Branches_iter1.java"]


class TestScheduler:
    """Test end-to-end runs with a fake analyzer."""

    def test_full_run(self, settings):
        scheduler = FakeScheduler(settings)

        summary = scheduler.run()

        assert summary.tool == ToolKind.CODENAVI
        assert summary.seed_folders == 2
        assert summary.seeds == 2
        assert summary.mutants > 0
        assert summary.invocations == 2
        assert summary.launched == 2
        assert summary.skipped == 0
        assert summary.failed_report_paths == []
        assert summary.failed_tool_executions == []

        seed = str((settings.seed_path / "group1" / "Branches.java").absolute())
        assert scheduler.index.bugs(seed) == {CODENAVI_BUG_TYPE: [3]}
        assert summary.files_with_violations == 2
        assert summary.total_violations == 2

    def test_reports_written_under_tool_folder(self, settings):
        scheduler = FakeScheduler(settings)

        scheduler.run()

        results = settings.results_dir / "codenavi"
        assert sorted(p.name for p in results.iterdir()) == ["group1.xml", "group2.xml"]

    def test_mutants_without_findings_are_inconsistent(self, settings):
        scheduler = FakeScheduler(settings)

        summary = scheduler.run()

        assert len(summary.inconsistencies) == summary.mutants
        for item in summary.inconsistencies:
            assert item.bug_type == CODENAVI_BUG_TYPE
            assert item.seed_count == 1
            assert item.mutant_count == 0
            assert item.kind == "false_negative"

    def test_rerun_regenerates_same_mutants(self, settings):
        first = FakeScheduler(settings).run()
        second = FakeScheduler(settings).run()

        assert first.mutants == second.mutants
        assert len(second.inconsistencies) == second.mutants

    def test_without_mutation(self, settings):
        settings.mutation = False

        summary = FakeScheduler(settings).run()

        assert summary.mutants == 0
        assert summary.inconsistencies == []
        assert not list(settings.seed_path.rglob("*_iter*.java"))

    def test_bounded_concurrency(self, settings, tmp_path):
        for i in range(6):
            group = settings.seed_path / f"extra{i}"
            group.mkdir()
            (group / f"E{i}.java").write_text(f"class E{i} {{}}\n")
        settings.mutation = False
        scheduler = FakeScheduler(settings, delay=0.05)

        summary = scheduler.run()

        assert summary.invocations == 8
        assert scheduler.adapter.calls == 8
        assert scheduler.adapter.peak <= 2

    def test_cancelled_before_start(self, settings):
        token = CancellationToken()
        token.cancel()
        scheduler = FakeScheduler(settings, cancel_token=token)

        summary = scheduler.run()

        assert summary.mutants == 0
        assert summary.skipped == summary.invocations == 2
        assert summary.launched == 0
        assert scheduler.adapter.calls == 0
        assert len(scheduler.index) == 0

    def test_launch_failures_recorded(self, settings):
        settings.mutation = False
        scheduler = Scheduler(settings)

        with patch("statfier.analyzers.base.subprocess.run", side_effect=FileNotFoundError("java")):
            summary = scheduler.run()

        assert summary.launched == 0
        assert len(summary.failed_tool_executions) == 2
        assert summary.failed_report_paths == []
        assert summary.total_violations == 0

    def test_worker_exception_recorded(self, settings):
        settings.mutation = False
        scheduler = FakeScheduler(settings)
        adapter = scheduler.create_adapter(settings.analyzers[ToolKind.CODENAVI])
        task = InvocationTask(settings.seed_path / "group1", settings.results_dir / "g.xml")

        with patch.object(FakeCodeNavi, "invoke", side_effect=RuntimeError("boom")):
            result = scheduler._invoke_one(adapter, task)

        assert result.launched is False
        assert scheduler.ledger.failed_tool_executions == [
            f"codenavi: {settings.seed_path / 'group1'}"
        ]

    def test_malformed_report_recorded(self, settings):
        settings.mutation = False
        scheduler = FakeScheduler(settings)

        def broken(self, seed_folder, report_path):
            Path(report_path).parent.mkdir(parents=True, exist_ok=True)
            Path(report_path).write_text("<r><errors>")
            return True

        with patch.object(FakeCodeNavi, "invoke", broken):
            summary = scheduler.run()

        assert len(summary.failed_report_paths) == 2
        assert summary.launched == 2

    def test_no_analyzer_enabled(self, settings):
        settings.analyzers[ToolKind.CODENAVI].enabled = False

        with pytest.raises(NoAnalyzerEnabledError):
            FakeScheduler(settings).run()

        assert not settings.results_dir.exists()

    def test_reset(self, settings):
        scheduler = FakeScheduler(settings)
        scheduler.run()
        old_index = scheduler.index

        scheduler.reset()

        assert scheduler.index is not old_index
        assert len(scheduler.index) == 0
        assert scheduler.ledger.is_empty()

    def test_default_worker_count(self, settings):
        settings.max_workers = None

        assert FakeScheduler(settings).max_workers >= 1


class TestMutateSeeds:
    """Test mutant regeneration across seeds of one folder."""

    @pytest.fixture
    def group(self, tmp_path) -> Path:
        group = tmp_path / "seeds" / "lists"
        group.mkdir(parents=True)
        for name in ["List", "List_iterator"]:
            (group / f"{name}.java").write_text(
                f"class {name} {{\n    void m(boolean a) {{\n        if (a) x(); else y();\n    }}\n}}\n"
            )
        return group

    def test_prefix_sibling_seed_survives(self, settings, group):
        scheduler = Scheduler(settings)

        seeds, mutants = scheduler.mutate_seeds([group])

        assert seeds == 2
        assert mutants > 0
        assert (group / "List.java").exists()
        assert (group / "List_iterator.java").exists()
        assert (group / "List_iter1.java").exists()
        assert (group / "List_iterator_iter1.java").exists()

    def test_rerun_replaces_only_own_mutants(self, settings, group):
        scheduler = Scheduler(settings)
        scheduler.mutate_seeds([group])
        stale = group / "List_iter99.java"
        stale.write_text("class Stale {}\n")

        scheduler.mutate_seeds([group])

        assert not stale.exists()
        assert (group / "List_iterator.java").exists()

    def test_seed_failure_is_local(self, settings, group):
        scheduler = Scheduler(settings)

        with patch.object(
            scheduler.engine,
            "apply_applicable_transforms",
            side_effect=[RuntimeError("boom"), [group / "List_iterator_iter1.java"]],
        ):
            seeds, mutants = scheduler.mutate_seeds([group])

        assert seeds == 2
        assert mutants == 1
