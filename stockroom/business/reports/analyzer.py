"""
Report analysis with AI enhancement and deterministic fallback
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from stockroom.business.reports.ai_summarizer import (
    Summarizer,
    SummarizerError,
    build_prompt,
    parse_ai_response,
)
from stockroom.business.reports.fallback import fallback_analysis
from stockroom.logger import get_logger

logger = get_logger("stockroom.business.reports.analyzer")

SOURCE_AI = 'ai'
SOURCE_HYBRID = 'hybrid'
SOURCE_FALLBACK = 'fallback'
SOURCE_EMPTY = 'empty'
SOURCE_ERROR = 'error'


@dataclass
class AnalyzedReport:
    report_type: str
    data: object
    analysis: dict
    source: str

    def to_dict(self) -> dict:
        return {
            'reportType': self.report_type,
            'data': self.data,
            'analysis': self.analysis,
            'source': self.source,
        }


def _is_empty(data) -> bool:
    return data is None or (isinstance(data, (list, dict)) and len(data) == 0)


class ReportAnalyzer:
    """
    Produces an analysis for a report payload.

    Without a summarizer the deterministic analysis is used. With one, a
    valid AI answer wins; an unusable answer is attached to the fallback
    analysis; a failed call degrades to the fallback silently.
    """

    def __init__(self, summarizer: Optional[Summarizer] = None, currency: str = ''):
        self.summarizer = summarizer
        self.currency = currency

    def analyze(self, kind: str, data) -> AnalyzedReport:
        if _is_empty(data):
            return AnalyzedReport(kind, [], {
                'summary': 'No data available for analysis',
                'recommendations': ['Start recording sales/inventory data to enable analysis'],
            }, SOURCE_EMPTY)

        fallback_data, fallback = fallback_analysis(kind, data, self.currency)
        if self.summarizer is None:
            return AnalyzedReport(kind, fallback_data, fallback, SOURCE_FALLBACK)

        try:
            text = self.summarizer.complete(build_prompt(kind, data))
        except SummarizerError as e:
            logger.info(f"Using fallback analysis for {kind}: {e}")
            return AnalyzedReport(kind, fallback_data, fallback, SOURCE_FALLBACK)

        parsed = parse_ai_response(text, kind)
        if parsed is not None:
            return AnalyzedReport(kind, data, parsed, SOURCE_AI)

        return AnalyzedReport(kind, fallback_data, dict(fallback, aiSummary=text), SOURCE_HYBRID)


def error_report(kind: str, message: str) -> AnalyzedReport:
    return AnalyzedReport(kind, [], {
        'error': message,
        'summary': 'Failed to generate report',
        'recommendations': ['Check system logs for error details'],
    }, SOURCE_ERROR)
