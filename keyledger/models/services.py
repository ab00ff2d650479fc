# keyledger/models/services.py

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class ServiceIn(BaseModel):
    servicename: str = Field(..., min_length=1)
    description: Optional[str] = None
    unitprice: Decimal = Decimal("0")
    istaxed: Optional[bool] = False
    isparts: Optional[bool] = False


class ServiceUpdate(BaseModel):
    description: Optional[str] = None
    unitprice: Decimal
    istaxed: Optional[bool] = False
    isparts: Optional[bool] = False


class ServiceOut(BaseModel):
    service_id: int
    servicename: str
    description: Optional[str] = None
    unitprice: Decimal
    istaxed: bool
    isparts: bool

    class Config:
        from_attributes = True


class ServiceListResponse(BaseModel):
    services: List[ServiceOut]
