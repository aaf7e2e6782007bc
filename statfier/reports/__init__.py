"""Native report parsing."""

from .parsers import CODENAVI_BUG_TYPE, REPORT_PARSERS, get_report_parser
from .reader import ReportReader

__all__ = ["CODENAVI_BUG_TYPE", "REPORT_PARSERS", "ReportReader", "get_report_parser"]
