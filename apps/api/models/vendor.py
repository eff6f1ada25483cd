from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class VendorIn(BaseModel):
    company_name: str = Field(
        ...,
        min_length=1,
        example="Apex Office Supply",
        description="Display name of the vendor; its first three characters are the vendor's invoice initials",
    )
    contact_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    tin: Optional[str] = Field(None, description="Tax identification number")
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None


class Vendor(VendorIn):
    id: UUID = Field(
        ...,
        example="98681ed3-d1e5-4440-b249-85f181f32b0e",
        description="Vendor UUID"
    )
