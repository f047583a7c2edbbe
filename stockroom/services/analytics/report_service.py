"""
Report Service
Gathers report variants for an owner and runs them through the analyzer.
"""

from datetime import date
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from stockroom.business.core.errors import ProductNotFound, ValidationError
from stockroom.business.reports.ai_summarizer import TogetherSummarizer
from stockroom.business.reports.analyzer import AnalyzedReport, ReportAnalyzer, error_report
from stockroom.business.reports.variants import (
    REPORT_KINDS,
    REPORT_TYPES,
    ProductPerformanceReport,
    ProductSalesHistory,
    ReorderReport,
    SalesSeriesReport,
)
from stockroom.data.catalog.product import Product
from stockroom.logger import get_logger
from stockroom.services.analytics.performance_service import PerformanceService
from stockroom.services.analytics.reorder_service import ReorderService
from stockroom.services.analytics.sales_service import SalesService

logger = get_logger("stockroom.services.analytics.report_service")


def validate_kind(kind: str) -> str:
    if kind not in REPORT_TYPES:
        raise ValidationError({'reportType': f"reportType must be one of {', '.join(REPORT_KINDS)}"})
    return kind


class ReportService:

    @staticmethod
    def build(kind: str, user_id: int, today: Optional[date] = None):
        """Return the report variant for `kind`"""
        report_type = REPORT_TYPES[validate_kind(kind)]
        if issubclass(report_type, SalesSeriesReport):
            return report_type(series=SalesService.daily_series(user_id, report_type.days, today))
        if report_type is ReorderReport:
            return ReorderReport(result=ReorderService.get_suggestions(user_id, today=today))
        if report_type is ProductPerformanceReport:
            return PerformanceService.get_report(user_id, today)
        raise ValidationError({'reportType': f"Unsupported report type: {kind}"})

    @staticmethod
    def analyzer() -> ReportAnalyzer:
        config = current_app.config
        return ReportAnalyzer(
            summarizer=TogetherSummarizer.from_config(config),
            currency=config.get('CURRENCY_SYMBOL', ''),
        )

    @staticmethod
    def generate(kind: str, user_id: int, today: Optional[date] = None) -> AnalyzedReport:
        """
        Build and analyze a report. Database errors degrade to an error
        report rather than failing the request.
        """
        validate_kind(kind)
        try:
            report = ReportService.build(kind, user_id, today)
        except SQLAlchemyError as e:
            logger.error(f"Failed to gather {kind} report data: {e}")
            return error_report(kind, 'Failed to gather report data')

        data = [] if report.is_empty else report.to_payload()
        return ReportService.analyzer().analyze(kind, data)

    @staticmethod
    def analyze_payload(kind: str, data) -> AnalyzedReport:
        """Analysis of client-supplied report data"""
        return ReportService.analyzer().analyze(validate_kind(kind), data)

    @staticmethod
    def predict_product_sales(user_id: int, product_id: int, today: Optional[date] = None) -> AnalyzedReport:
        """
        Weekly and monthly sales prediction for one product from its
        fulfilled sales history.

        Raises:
            ProductNotFound: no such product in the owner's catalog
        """
        product = Product.get_owned(product_id, user_id)
        if product is None:
            raise ProductNotFound(product_id)

        history = ProductSalesHistory(
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            stock=product.stock,
            reorder_point=product.reorder_point,
            lead_time_days=product.lead_time_days,
            history=SalesService.product_quantity_series(user_id, product.id, today=today),
        )
        return ReportService.analyzer().analyze(ProductSalesHistory.kind, history.to_payload())
