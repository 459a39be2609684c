"""
Reports services package.

- DailySalesReportService: business day reports, per employee and per business
- MonthlyBusinessReportService: month summaries folded from the daily reports
"""

from .daily_service import DailySalesReportService
from .monthly_service import MonthlyBusinessReportService

__all__ = [
    'DailySalesReportService',
    'MonthlyBusinessReportService',
]
