# keyledger/models/documents.py

import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LineItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service_id: Optional[int] = None
    servicename: Optional[str] = None
    description: Optional[str] = None
    # coerced later by coerce_or_drop
    unitprice: Any = None
    quantity: Any = None
    istaxed: Optional[bool] = Field(
        default=False,
        validation_alias=AliasChoices("istaxed", "isTaxed"),
    )


class DocumentPayload(BaseModel):
    """
    Body of invoice/quote create and update requests.

    Field aliases keep the wire names used by the existing web client.
    `dueDate` is ignored for quotes.
    """

    model_config = ConfigDict(populate_by_name=True)

    customer_id: Optional[int] = None
    po_number: Optional[str] = Field(default=None, alias="PO")
    description: Optional[str] = None
    comments: Optional[str] = None
    vin: Optional[str] = None
    start_date: Optional[datetime.date] = Field(default=None, alias="startDate")
    due_date: Optional[datetime.date] = Field(default=None, alias="dueDate")
    services: List[LineItemIn] = Field(default_factory=list)

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def _blank_date_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")


class ConvertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    due_date: Optional[datetime.date] = Field(default=None, alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_date_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LineItemOut(BaseModel):
    service_id: int
    servicename: str
    description: Optional[str] = None
    quantity: int
    unitprice: Decimal
    totalprice: Decimal
    istaxed: bool


class _DocumentOut(BaseModel):
    customer_id: int
    customer_name: str
    date: datetime.date
    status: str
    po_number: Optional[str] = None
    vin: Optional[str] = None
    description: Optional[str] = None
    private_comments: Optional[str] = None
    subtotal: Decimal
    tax_total: Decimal
    totalamount: Decimal


class InvoiceOut(_DocumentOut):
    invoice_id: int
    duedate: Optional[datetime.date] = None


class QuoteOut(_DocumentOut):
    quote_id: int


class InvoiceDetailOut(InvoiceOut):
    customer_address: Optional[str] = None
    services: List[LineItemOut]


class QuoteDetailOut(QuoteOut):
    customer_address: Optional[str] = None
    services: List[LineItemOut]


class InvoiceListResponse(BaseModel):
    invoices: List[InvoiceOut]


class QuoteListResponse(BaseModel):
    quotes: List[QuoteOut]


class WriteResult(BaseModel):
    success: bool = True
    message: str
    invoice_id: Optional[int] = None
    quote_id: Optional[int] = None
    payment_id: Optional[int] = None


class SweepResponse(BaseModel):
    success: bool = True
    updatedCount: int
    updatedInvoices: List[int]
