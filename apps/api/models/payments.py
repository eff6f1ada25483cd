from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .documents import Money


class PaymentType(str, Enum):
    FULL = "Full Payment"
    PART = "Part Payment"
    FINAL = "Final Payment"


class PaymentVoucherIn(BaseModel):
    payee_name: str = Field(..., min_length=1)
    voucher_date: date
    amount: Money = Field(..., ge=0)
    payment_method: str
    description: Optional[str] = None
    prepared_by: Optional[str] = None
    approved_by: Optional[str] = None
    payee_bank_name: Optional[str] = None
    payee_account_name: Optional[str] = None
    payee_account_number: Optional[str] = None


class PaymentVoucher(PaymentVoucherIn):
    id: UUID
    voucher_number: str


class PaymentReceiptIn(BaseModel):
    client_id: UUID
    payment_date: date
    amount: Money = Field(..., ge=0)
    payment_method: str
    payment_type: PaymentType = PaymentType.FULL
    related_invoice_number: Optional[str] = None
    total_amount: Optional[Money] = Field(None, ge=0)  # invoice total the payment is applied to
    notes: Optional[str] = None
    issued_by: Optional[str] = None

    def balance_due(self) -> Optional[Decimal]:
        """Balance left on the related invoice, when its total is known."""
        if self.total_amount is None:
            return None
        return max(self.total_amount - self.amount, Decimal("0"))


class PaymentReceipt(PaymentReceiptIn):
    id: UUID
    receipt_number: str
    amount_due: Optional[Money] = None


class PaymentVoucherView(PaymentVoucher):
    # printed vouchers carry the amount in figures and in words
    amount_display: str
    amount_in_words: str


class PaymentReceiptView(PaymentReceipt):
    amount_display: str
    amount_in_words: str


class PaymentVoucherPage(BaseModel):
    items: List[PaymentVoucher]
    limit: int
    offset: int


class PaymentReceiptPage(BaseModel):
    items: List[PaymentReceipt]
    limit: int
    offset: int
