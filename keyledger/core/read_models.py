# keyledger/core/read_models.py

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine, RowMapping

from keyledger.core.kinds import DocumentKind
from keyledger.db.schema import customer, services


def _line_items(rows: Sequence[RowMapping]) -> List[Dict[str, Any]]:
    # A LEFT JOIN on an aggregate without lines still yields one row, with
    # every line column NULL. That row is not a line item.
    return [
        {
            "service_id": row["line_service_id"],
            "servicename": row["servicename"],
            "description": row["service_description"],
            "quantity": row["quantity"],
            "unitprice": row["line_unitprice"],
            "totalprice": row["totalprice"],
            "istaxed": bool(row["istaxed"]),
        }
        for row in rows
        if row["line_service_id"] is not None
    ]


def fetch_document(
    conn: Connection, kind: DocumentKind, document_id: int
) -> Optional[Dict[str, Any]]:
    parent, detail = kind.table, kind.detail_table

    stmt = (
        select(
            *parent.c,
            customer.c.customer_name,
            customer.c.customer_address,
            services.c.service_id.label("line_service_id"),
            services.c.servicename,
            services.c.description.label("service_description"),
            detail.c.istaxed,
            detail.c.quantity,
            detail.c.unitprice.label("line_unitprice"),
            detail.c.totalprice,
        )
        .select_from(
            parent.join(customer, parent.c.customer_id == customer.c.customer_id)
            .outerjoin(detail, kind.detail_fk_col == kind.id_col)
            .outerjoin(services, detail.c.service_id == services.c.service_id)
        )
        .where(kind.id_col == document_id)
        .order_by(kind.detail_id_col)
    )

    rows = conn.execute(stmt).mappings().all()
    if not rows:
        return None

    head = rows[0]
    document = {col.name: head[col.name] for col in parent.c}
    document["customer_name"] = head["customer_name"]
    document["customer_address"] = head["customer_address"]
    document["services"] = _line_items(rows)
    return document


def get_document(
    engine: Engine, kind: DocumentKind, document_id: int
) -> Optional[Dict[str, Any]]:
    """
    Load one aggregate with its customer and line items, or None.

    This is the shape handed to the PDF renderer: totals as stored, lines
    ordered as they were inserted, `services` always a list.
    """
    with engine.connect() as conn:
        return fetch_document(conn, kind, document_id)


def list_documents(engine: Engine, kind: DocumentKind) -> List[Dict[str, Any]]:
    parent = kind.table
    stmt = (
        select(*parent.c, customer.c.customer_name)
        .select_from(
            parent.join(customer, parent.c.customer_id == customer.c.customer_id)
        )
        .order_by(parent.c.date.desc(), kind.id_col.desc())
    )

    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()

    return [dict(row) for row in rows]
