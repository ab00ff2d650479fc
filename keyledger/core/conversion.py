# keyledger/core/conversion.py

import logging
from datetime import date
from typing import Optional

from keyledger.core.documents import insert_lines
from keyledger.core.kinds import INVOICE, QUOTE, InvoiceStatus, QuoteStatus
from keyledger.core.read_models import fetch_document
from keyledger.core.transaction import transaction
from keyledger.errors import NotFound, ValidationFailure

logger = logging.getLogger(__name__)


def convert_quote_to_invoice(
    engine, quote_id: int, due_date: Optional[date], *, today: date
) -> int:
    """
    Turn a pending quote into a new pending invoice dated today.

    Money fields and line items are copied as stored on the quote, not
    recomputed. The quote is marked accepted in the same transaction, so a
    failure anywhere leaves it pending and no invoice behind.
    """
    with transaction(engine, "convert quote to invoice") as conn:
        quote = fetch_document(conn, QUOTE, quote_id)
        if quote is None:
            raise NotFound("Quote not found")
        if quote["status"] != QuoteStatus.PENDING.value:
            raise ValidationFailure(f"Quote is already {quote['status']}")

        result = conn.execute(
            INVOICE.table.insert().values(
                customer_id=quote["customer_id"],
                date=today,
                duedate=due_date,
                status=InvoiceStatus.PENDING.value,
                po_number=quote["po_number"],
                description=quote["description"],
                vin=quote["vin"],
                private_comments=quote["private_comments"],
                subtotal=quote["subtotal"],
                tax_total=quote["tax_total"],
                totalamount=quote["totalamount"],
            )
        )
        invoice_id = result.inserted_primary_key[0]

        insert_lines(
            conn,
            INVOICE,
            invoice_id,
            [
                {
                    "service_id": line["service_id"],
                    "quantity": line["quantity"],
                    "unitprice": line["unitprice"],
                    "totalprice": line["totalprice"],
                    "istaxed": line["istaxed"],
                }
                for line in quote["services"]
            ],
        )

        conn.execute(
            QUOTE.table.update()
            .where(QUOTE.id_col == quote_id)
            .values(status=QuoteStatus.ACCEPTED.value)
        )

    logger.info("Converted quote %s into invoice %s", quote_id, invoice_id)
    return invoice_id
