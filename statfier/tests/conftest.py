"""Shared fixtures for Statfier tests."""

import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

CODENAVI_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


def codenavi_xml(entries: list[tuple[str, str]]) -> str:
    """Build a CodeNavi report from (reportLine, fileName) pairs."""
    errors = "".join(
        "  <error>\n"
        "   <defectInfo>\n"
        f"    <reportLine>{line}</reportLine>\n"
        f"    <fileName>{name}</fileName>\n"
        "   </defectInfo>\n"
        "  </error>\n"
        for line, name in entries
    )
    return f"{CODENAVI_HEADER}<r>\n <errors>\n{errors} </errors>\n</r>"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def branches_seed(tmp_path) -> Path:
    """Copy of Branches.java in a seed group folder."""
    group = tmp_path / "seeds" / "group1"
    group.mkdir(parents=True)
    target = group / "Branches.java"
    shutil.copy(FIXTURES / "Branches.java", target)
    return target


@pytest.fixture
def loops_seed(tmp_path) -> Path:
    group = tmp_path / "seeds" / "group2"
    group.mkdir(parents=True)
    target = group / "Loops.java"
    shutil.copy(FIXTURES / "Loops.java", target)
    return target


@pytest.fixture
def write_report(tmp_path):
    """Factory writing report text to a file under tmp_path."""

    def _write(content: str, name: str = "report.xml") -> Path:
        path = tmp_path / "reports" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_codenavi_xml():
    return codenavi_xml
