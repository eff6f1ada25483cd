from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Annotated, ClassVar, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer, field_validator

Decimal4 = Annotated[Decimal, Field(max_digits=18, decimal_places=4)]
# Money goes over the wire as a string with exactly two decimals, e.g. "1234.50"
Money = Annotated[
    Decimal,
    Field(max_digits=18, decimal_places=2),
    PlainSerializer(lambda v: f"{v:.2f}", return_type=str, when_used="json"),
]
Percent = Annotated[Decimal, Field(max_digits=5, decimal_places=2)]

CENTS = Decimal("0.01")


class DocumentType(str, Enum):
    PURCHASE_ORDER = "purchase_order"
    SALES_INVOICE = "sales_invoice"
    VENDOR_INVOICE = "vendor_invoice"
    PAYMENT_VOUCHER = "payment_voucher"
    PAYMENT_RECEIPT = "payment_receipt"

    @property
    def prefix(self) -> str:
        return DOCUMENT_PREFIXES[self]


DOCUMENT_PREFIXES = {
    DocumentType.PURCHASE_ORDER: "PO",
    DocumentType.SALES_INVOICE: "INV",
    DocumentType.VENDOR_INVOICE: "VINV",
    DocumentType.PAYMENT_VOUCHER: "PV",
    DocumentType.PAYMENT_RECEIPT: "RCPT",
}


class TaxPolicy(str, Enum):
    PERCENT_OF_SUBTOTAL = "percent-of-subtotal"
    PER_LINE_TAXABLE = "per-line-taxable"
    PER_LINE_TAXABLE_INCLUSIVE = "per-line-taxable-inclusive"


class DiscountMode(str, Enum):
    PERCENT = "percent"
    PER_LINE = "per-line"


class TaxSign(str, Enum):
    ADD = "add"            # VAT
    WITHHOLD = "withhold"  # withholding tax, deducted from the payable total


class LineItem(BaseModel):
    # sign checks live in the totals calculator so they surface as InvalidLineItem
    description: str = ""
    quantity: Decimal4
    unit_price: Decimal4
    discount: Decimal4 = Decimal("0")
    taxable: bool = False


class TotalsResult(BaseModel):
    subtotal: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")

    def rounded(self) -> "TotalsResult":
        """Quantize every figure to cents for display or persistence."""
        return TotalsResult(
            subtotal=self.subtotal.quantize(CENTS, rounding=ROUND_HALF_UP),
            discount_amount=self.discount_amount.quantize(CENTS, rounding=ROUND_HALF_UP),
            tax=self.tax.quantize(CENTS, rounding=ROUND_HALF_UP),
            grand_total=self.grand_total.quantize(CENTS, rounding=ROUND_HALF_UP),
        )


class TotalsPolicy(BaseModel):
    policy: TaxPolicy = TaxPolicy.PERCENT_OF_SUBTOTAL
    rate: Decimal = Decimal("0")
    discount_mode: Optional[DiscountMode] = None
    tax_sign: TaxSign = TaxSign.ADD


# Tagged request bodies, one per line-item document type.

class PurchaseOrderIn(BaseModel):
    doc_type: ClassVar[DocumentType] = DocumentType.PURCHASE_ORDER
    vendor_id: UUID
    doc_date: date
    due_date: Optional[date] = None  # delivery date
    project_name: Optional[str] = None
    notes: Optional[str] = None
    discount_percent: Percent = Decimal("0")
    apply_tax: bool = True
    lines: List[LineItem] = Field(..., min_length=1)

    @property
    def party_id(self) -> UUID:
        return self.vendor_id


class SalesInvoiceIn(BaseModel):
    doc_type: ClassVar[DocumentType] = DocumentType.SALES_INVOICE
    client_id: UUID
    doc_date: date
    due_date: Optional[date] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None
    discount_percent: Percent = Decimal("0")
    apply_tax: bool = False  # add VAT
    lines: List[LineItem] = Field(..., min_length=1)

    @property
    def party_id(self) -> UUID:
        return self.client_id


class VendorInvoiceIn(BaseModel):
    doc_type: ClassVar[DocumentType] = DocumentType.VENDOR_INVOICE
    vendor_id: UUID
    doc_date: date
    due_date: Optional[date] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None
    discount_percent: Percent = Decimal("0")
    apply_tax: bool = True
    lines: List[LineItem] = Field(..., min_length=1)

    @field_validator("discount_percent")
    @classmethod
    def _per_line_discounts_only(cls, v: Decimal) -> Decimal:
        if v != 0:
            raise ValueError("vendor invoices take per-line discounts; discount_percent must be 0")
        return v

    @property
    def party_id(self) -> UUID:
        return self.vendor_id


class DocumentSummary(BaseModel):
    id: UUID
    doc_type: DocumentType
    doc_number: str
    party_id: UUID
    doc_date: date
    due_date: Optional[date] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None
    status: str
    discount_percent: Percent = Decimal("0")
    apply_tax: bool = False
    subtotal: Money
    discount_amount: Money
    tax: Money
    total: Money


class Document(DocumentSummary):
    lines: List[LineItem] = Field(default_factory=list)


class DocumentPage(BaseModel):
    items: List[DocumentSummary]
    limit: int
    offset: int


class TotalsPreviewIn(BaseModel):
    doc_type: DocumentType
    discount_percent: Percent = Decimal("0")
    apply_tax: bool = True
    lines: List[LineItem] = Field(default_factory=list)


class TotalsPreview(BaseModel):
    subtotal: Money
    discount_amount: Money
    tax: Money
    grand_total: Money
    grand_total_display: str
    grand_total_in_words: str
