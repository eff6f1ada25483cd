from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class Signatory(BaseModel):
    name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)


class BankAccount(BaseModel):
    bank_name: str = Field(..., min_length=1)
    account_name: str = Field(..., min_length=1)
    account_number: str = Field(..., min_length=1)


class CompanyProfileIn(BaseModel):
    name: str = Field(
        ...,
        min_length=1,
        example="Bright Star Logistics",
        description="Company name; its first three characters are the document-number initials",
    )
    address: Optional[str] = None
    tin: Optional[str] = Field(None, description="Tax identification number")
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    signatories: List[Signatory] = Field(default_factory=list)
    bank_accounts: List[BankAccount] = Field(default_factory=list)


class CompanyProfile(CompanyProfileIn):
    id: UUID
