from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Union

DateLike = Union[date, datetime, str]


def month_key(value: DateLike) -> str:
    """YYYY-MM bucket for a date, datetime or ISO string."""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m")
    return str(value)[:7]


def monthly_summary(
    income_rows: Iterable[Mapping[str, Any]],
    expense_rows: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Group income (sales invoice totals) and expenses (payment voucher
    amounts) by calendar month.

    Each row needs a `created_at` and an `amount`. Months are returned in
    ascending order as {"name": "YYYY-MM", "income": ..., "expenses": ...}.
    """
    buckets: Dict[str, Dict[str, Decimal]] = {}

    def bucket(key: str) -> Dict[str, Decimal]:
        return buckets.setdefault(key, {"income": Decimal("0"), "expenses": Decimal("0")})

    for row in income_rows:
        bucket(month_key(row["created_at"]))["income"] += Decimal(str(row["amount"] or 0))
    for row in expense_rows:
        bucket(month_key(row["created_at"]))["expenses"] += Decimal(str(row["amount"] or 0))

    return [
        {"name": month, "income": buckets[month]["income"], "expenses": buckets[month]["expenses"]}
        for month in sorted(buckets)
    ]
