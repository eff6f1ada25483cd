from decimal import Decimal
from typing import Dict

from pydantic import BaseModel

from .documents import Money


class DocumentTypeStats(BaseModel):
    count: int = 0
    total: Money = Decimal("0")
    tax: Money = Decimal("0")
    unpaid_count: int = 0
    unpaid_total: Money = Decimal("0")


class CountAndTotal(BaseModel):
    count: int = 0
    total: Money = Decimal("0")


class TaxSummary(BaseModel):
    vat_on_sales: Money
    vat_on_purchases: Money
    withholding: Money


class DashboardOverview(BaseModel):
    documents: Dict[str, DocumentTypeStats]
    payments: Dict[str, CountAndTotal]
    receivables: CountAndTotal
    payables: CountAndTotal
    taxes: TaxSummary


class MonthlyFigures(BaseModel):
    name: str  # YYYY-MM
    income: Money
    expenses: Money
