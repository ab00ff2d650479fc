# keyledger/api/quotes.py

from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.engine import Engine

from keyledger.api.deps import get_today
from keyledger.config import Settings, get_settings
from keyledger.core import documents
from keyledger.core.conversion import convert_quote_to_invoice
from keyledger.core.kinds import QUOTE
from keyledger.core.read_models import get_document, list_documents
from keyledger.db.engine import get_engine
from keyledger.errors import NotFound
from keyledger.models.documents import (
    ConvertRequest,
    DocumentPayload,
    QuoteDetailOut,
    QuoteListResponse,
    QuoteOut,
    WriteResult,
)
from keyledger.pdf import render_document_pdf

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _load(engine: Engine, quote_id: int) -> dict:
    quote = get_document(engine, QUOTE, quote_id)
    if quote is None:
        raise NotFound("Quote not found")
    return quote


@router.get("", response_model=QuoteListResponse)
def list_quotes(engine: Engine = Depends(get_engine)) -> QuoteListResponse:
    rows = list_documents(engine, QUOTE)
    return QuoteListResponse(quotes=[QuoteOut(**row) for row in rows])


@router.post("", response_model=WriteResult)
def create_quote(
    payload: DocumentPayload,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
) -> WriteResult:
    quote_id = documents.create_document(
        engine, QUOTE, payload, today=today, tax_rate=settings.TAX_RATE
    )
    return WriteResult(message="Quote created successfully", quote_id=quote_id)


@router.get("/{quote_id}", response_model=QuoteDetailOut)
def get_quote(quote_id: int, engine: Engine = Depends(get_engine)) -> QuoteDetailOut:
    """
    One quote with customer details and line items, e.g. to prefill an invoice.
    """
    return QuoteDetailOut(**_load(engine, quote_id))


@router.put("/{quote_id}", response_model=WriteResult)
def update_quote(
    quote_id: int,
    payload: DocumentPayload,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
) -> WriteResult:
    documents.update_document(
        engine, QUOTE, quote_id, payload, today=today, tax_rate=settings.TAX_RATE
    )
    return WriteResult(message="Quote updated successfully", quote_id=quote_id)


@router.delete("/{quote_id}", response_model=WriteResult)
def delete_quote(quote_id: int, engine: Engine = Depends(get_engine)) -> WriteResult:
    documents.delete_document(engine, QUOTE, quote_id)
    return WriteResult(message="Quote deleted successfully", quote_id=quote_id)


@router.post("/{quote_id}/convert", response_model=WriteResult)
def convert_quote(
    quote_id: int,
    body: ConvertRequest,
    engine: Engine = Depends(get_engine),
    today: date = Depends(get_today),
) -> WriteResult:
    invoice_id = convert_quote_to_invoice(engine, quote_id, body.due_date, today=today)
    return WriteResult(
        message="Quote converted to invoice successfully",
        quote_id=quote_id,
        invoice_id=invoice_id,
    )


@router.post("/{quote_id}/reject", response_model=WriteResult)
def reject_quote(quote_id: int, engine: Engine = Depends(get_engine)) -> WriteResult:
    documents.reject_quote(engine, quote_id)
    return WriteResult(message="Quote rejected", quote_id=quote_id)


@router.get("/{quote_id}/pdf")
def quote_pdf(
    quote_id: int,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> Response:
    content = render_document_pdf(
        _load(engine, quote_id), QUOTE, settings.TAX_RATE, settings.BUSINESS_NAME
    )
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="quote-{quote_id}.pdf"'},
    )
