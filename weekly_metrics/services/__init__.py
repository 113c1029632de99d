from .report_service import ReportOutput, TrendReportService

__all__ = ["ReportOutput", "TrendReportService"]
