# keyledger/api/invoices.py

from datetime import date, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.engine import Engine

from keyledger.api.deps import get_now, get_today
from keyledger.config import Settings, get_settings
from keyledger.core import documents
from keyledger.core.kinds import INVOICE
from keyledger.core.read_models import get_document, list_documents
from keyledger.db.engine import get_engine
from keyledger.errors import NotFound
from keyledger.models.documents import (
    DocumentPayload,
    InvoiceDetailOut,
    InvoiceListResponse,
    InvoiceOut,
    PaymentRequest,
    WriteResult,
)
from keyledger.pdf import render_document_pdf

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _load(engine: Engine, invoice_id: int) -> dict:
    invoice = get_document(engine, INVOICE, invoice_id)
    if invoice is None:
        raise NotFound("Invoice not found")
    return invoice


@router.get("", response_model=InvoiceListResponse)
def list_invoices(engine: Engine = Depends(get_engine)) -> InvoiceListResponse:
    """
    Flat invoice list with customer names, newest first.
    """
    rows = list_documents(engine, INVOICE)
    return InvoiceListResponse(invoices=[InvoiceOut(**row) for row in rows])


@router.post("", response_model=WriteResult)
def create_invoice(
    payload: DocumentPayload,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
) -> WriteResult:
    invoice_id = documents.create_document(
        engine, INVOICE, payload, today=today, tax_rate=settings.TAX_RATE
    )
    return WriteResult(message="Invoice created successfully", invoice_id=invoice_id)


@router.get("/{invoice_id}", response_model=InvoiceDetailOut)
def get_invoice(invoice_id: int, engine: Engine = Depends(get_engine)) -> InvoiceDetailOut:
    """
    One invoice with customer details and line items.
    """
    return InvoiceDetailOut(**_load(engine, invoice_id))


@router.put("/{invoice_id}", response_model=WriteResult)
def update_invoice(
    invoice_id: int,
    payload: DocumentPayload,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
) -> WriteResult:
    documents.update_document(
        engine, INVOICE, invoice_id, payload, today=today, tax_rate=settings.TAX_RATE
    )
    return WriteResult(message="Invoice updated successfully", invoice_id=invoice_id)


@router.delete("/{invoice_id}", response_model=WriteResult)
def delete_invoice(invoice_id: int, engine: Engine = Depends(get_engine)) -> WriteResult:
    documents.delete_document(engine, INVOICE, invoice_id)
    return WriteResult(message="Invoice deleted successfully", invoice_id=invoice_id)


@router.post("/{invoice_id}/payment", response_model=WriteResult)
def pay_invoice(
    invoice_id: int,
    body: PaymentRequest,
    engine: Engine = Depends(get_engine),
    now: datetime = Depends(get_now),
) -> WriteResult:
    payment_id = documents.mark_paid(engine, invoice_id, body.payment_method, now=now)
    return WriteResult(
        message=f"Invoice marked as paid with {body.payment_method.strip()}",
        invoice_id=invoice_id,
        payment_id=payment_id,
    )


@router.get("/{invoice_id}/pdf")
def invoice_pdf(
    invoice_id: int,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> Response:
    content = render_document_pdf(
        _load(engine, invoice_id), INVOICE, settings.TAX_RATE, settings.BUSINESS_NAME
    )
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="invoice-{invoice_id}.pdf"'},
    )
