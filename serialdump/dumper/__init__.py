"""Reporting and command-line tools for decoded streams."""

from .report import ClassReport as ClassReport
from .report import FieldReport as FieldReport
from .report import ObjectReport as ObjectReport
from .report import StreamSummary as StreamSummary
from .report import build_report as build_report
from .report import summarize as summarize
