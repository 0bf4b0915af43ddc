"""Services — MappingService, AnalysisReportBuilder, PerformanceMetrics."""

from safeguard_mapper.services.mapping_service import MappingService
from safeguard_mapper.services.metrics_service import PerformanceMetrics
from safeguard_mapper.services.report_builder import AnalysisReportBuilder

__all__ = ["MappingService", "PerformanceMetrics", "AnalysisReportBuilder"]
