from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ClientIn(BaseModel):
    company_name: str = Field(..., min_length=1)
    contact_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    tin: Optional[str] = None


class Client(ClientIn):
    id: UUID
