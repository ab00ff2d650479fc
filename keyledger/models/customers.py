# keyledger/models/customers.py

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: Optional[str] = Field(default=None, alias="name")
    customer_address: Optional[str] = Field(default=None, alias="address")


class CustomerOut(BaseModel):
    customer_id: int
    customer_name: str
    customer_address: Optional[str] = None

    class Config:
        from_attributes = True


class CustomerListResponse(BaseModel):
    customers: List[CustomerOut]
