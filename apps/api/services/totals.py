from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from ..errors import InvalidLineItem, InvalidTotalsPolicy
from ..models.documents import (
    DiscountMode,
    DocumentType,
    LineItem,
    TaxPolicy,
    TaxSign,
    TotalsPolicy,
    TotalsResult,
)
from ..settings import settings

ZERO = Decimal("0")
HUNDRED = Decimal("100")

LineLike = Union[LineItem, Mapping[str, Any]]


def D(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x or 0))


def policy_for(doc_type: DocumentType, apply_tax: bool = True) -> TotalsPolicy:
    """
    Tax policy each document type is computed under.

    Purchase orders carry withholding tax, which is deducted from the amount
    payable to the vendor. Sales invoices add VAT on the discounted subtotal
    when the invoice opts in. Vendor invoices record tax-inclusive amounts
    with a per-line taxable flag and per-line discounts.
    """
    if doc_type == DocumentType.PURCHASE_ORDER:
        return TotalsPolicy(
            policy=TaxPolicy.PERCENT_OF_SUBTOTAL,
            rate=settings.WITHHOLDING_TAX_RATE if apply_tax else ZERO,
            discount_mode=DiscountMode.PERCENT,
            tax_sign=TaxSign.WITHHOLD,
        )
    if doc_type == DocumentType.SALES_INVOICE:
        return TotalsPolicy(
            policy=TaxPolicy.PERCENT_OF_SUBTOTAL,
            rate=settings.VAT_RATE if apply_tax else ZERO,
            discount_mode=DiscountMode.PERCENT,
            tax_sign=TaxSign.ADD,
        )
    if doc_type == DocumentType.VENDOR_INVOICE:
        return TotalsPolicy(
            policy=TaxPolicy.PER_LINE_TAXABLE_INCLUSIVE,
            rate=settings.VAT_RATE if apply_tax else ZERO,
            discount_mode=DiscountMode.PER_LINE,
            tax_sign=TaxSign.ADD,
        )
    raise ValueError(f"{doc_type.value} documents have no line items")


def _coerce(idx: int, item: LineLike) -> LineItem:
    if isinstance(item, LineItem):
        line = item
    else:
        try:
            line = LineItem.model_validate(dict(item))
        except ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(part) for part in err["loc"]) or "line"
            raise InvalidLineItem(idx, field, err["msg"]) from e

    if line.quantity < 0:
        raise InvalidLineItem(idx, "quantity", f"must not be negative (got {line.quantity})")
    if line.unit_price < 0:
        raise InvalidLineItem(idx, "unit_price", f"must not be negative (got {line.unit_price})")
    if line.discount < 0:
        raise InvalidLineItem(idx, "discount", f"must not be negative (got {line.discount})")
    if line.discount > line.quantity * line.unit_price:
        raise InvalidLineItem(
            idx,
            "discount",
            f"{line.discount} exceeds the line amount {line.quantity * line.unit_price}",
        )
    return line


def compute_totals(
    items: Iterable[LineLike],
    tax_rate=0,
    discount_percent=0,
    *,
    policy: TaxPolicy = TaxPolicy.PERCENT_OF_SUBTOTAL,
    discount_mode: Optional[DiscountMode] = None,
    tax_sign: TaxSign = TaxSign.ADD,
) -> TotalsResult:
    """
    Compute subtotal, discount, tax and grand total for a list of line items.

    Amounts are kept as unrounded Decimals; call ``TotalsResult.rounded()``
    at the display or persistence boundary. The function is pure: the same
    inputs always give the same result.

    - PERCENT_OF_SUBTOTAL: every line is taxed, the taxable flag is ignored,
      tax = (subtotal - discount) * rate / 100.
    - PER_LINE_TAXABLE: only lines flagged taxable are taxed, each on its
      own amount net of its discount.
    - PER_LINE_TAXABLE_INCLUSIVE: taxable line amounts already contain tax.
      The pre-tax base amount / (1 + rate/100) goes into the subtotal and the
      remainder is the tax. A taxable line's discount is treated the same
      way, so the grand total equals what the lines add up to.

    Items may be LineItem instances or plain mappings. Quantities, prices and
    discounts carry at most four decimal places, the precision line items are
    stored with.

    Raises InvalidLineItem for a line that fails validation or has a
    negative quantity, price or discount. Raises
    InvalidTotalsPolicy for a negative rate or a percentage outside 0..100.
    """
    rate = D(tax_rate)
    pct = D(discount_percent)
    if rate < 0:
        raise InvalidTotalsPolicy(f"tax rate must not be negative (got {rate})")
    if pct < 0 or pct > HUNDRED:
        raise InvalidTotalsPolicy(f"discount percent must be within 0..100 (got {pct})")

    if discount_mode is None:
        if policy == TaxPolicy.PERCENT_OF_SUBTOTAL:
            discount_mode = DiscountMode.PERCENT
        else:
            discount_mode = DiscountMode.PER_LINE

    lines = [_coerce(idx, item) for idx, item in enumerate(items)]
    divisor = 1 + rate / HUNDRED

    subtotal = ZERO
    line_discounts = ZERO
    line_tax = ZERO
    for line in lines:
        amount = line.quantity * line.unit_price
        discount = line.discount
        if policy == TaxPolicy.PER_LINE_TAXABLE_INCLUSIVE and line.taxable:
            base = amount / divisor
            discount_base = discount / divisor
            subtotal += base
            line_discounts += discount_base
            line_tax += (amount - discount) - (base - discount_base)
            continue
        subtotal += amount
        line_discounts += discount
        if policy == TaxPolicy.PER_LINE_TAXABLE and line.taxable:
            line_tax += (amount - discount) * rate / HUNDRED

    if discount_mode == DiscountMode.PERCENT:
        discount_amount = subtotal * pct / HUNDRED
    else:
        discount_amount = line_discounts

    if policy == TaxPolicy.PERCENT_OF_SUBTOTAL:
        tax = (subtotal - discount_amount) * rate / HUNDRED
    else:
        tax = line_tax

    if tax_sign == TaxSign.WITHHOLD:
        grand_total = subtotal - discount_amount - tax
    else:
        grand_total = subtotal - discount_amount + tax

    return TotalsResult(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax=tax,
        grand_total=grand_total,
    )


def compute_document_totals(
    doc_type: DocumentType,
    items: Iterable[LineLike],
    *,
    discount_percent=0,
    apply_tax: bool = True,
) -> TotalsResult:
    """Totals for a document under its type's policy."""
    p = policy_for(doc_type, apply_tax)
    return compute_totals(
        items,
        p.rate,
        discount_percent,
        policy=p.policy,
        discount_mode=p.discount_mode,
        tax_sign=p.tax_sign,
    )
