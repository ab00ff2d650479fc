# keyledger/api/customers.py

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine

from keyledger.core.transaction import transaction
from keyledger.db.engine import get_engine
from keyledger.db.schema import customer
from keyledger.errors import NotFound, ValidationFailure
from keyledger.models.customers import CustomerIn, CustomerListResponse, CustomerOut

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=CustomerListResponse)
def list_customers(engine: Engine = Depends(get_engine)) -> CustomerListResponse:
    """
    Return all customers ordered by name.
    """
    with engine.connect() as conn:
        stmt = select(
            customer.c.customer_id,
            customer.c.customer_name,
            customer.c.customer_address,
        ).order_by(customer.c.customer_name)

        rows = conn.execute(stmt).mappings().all()

    return CustomerListResponse(customers=[CustomerOut(**row) for row in rows])


@router.post("", response_model=CustomerOut, status_code=201)
def upsert_customer(
    body: CustomerIn, engine: Engine = Depends(get_engine)
) -> CustomerOut:
    """
    Create a customer, or update the address of the one with the same name.
    """
    name = (body.customer_name or "").strip()
    if not name:
        raise ValidationFailure("Name is required")

    with transaction(engine, "save customer") as conn:
        insert = pg_insert if conn.dialect.name == "postgresql" else sqlite_insert
        stmt = insert(customer).values(
            customer_name=name,
            customer_address=body.customer_address or None,
        )
        # On conflict by customer_name, keep the row and refresh the address
        stmt = stmt.on_conflict_do_update(
            index_elements=[customer.c.customer_name],
            set_={"customer_address": stmt.excluded.customer_address},
        )
        conn.execute(stmt)

        row = conn.execute(
            select(customer).where(customer.c.customer_name == name)
        ).mappings().one()

    return CustomerOut(**row)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, engine: Engine = Depends(get_engine)) -> CustomerOut:
    """
    Return a single customer by ID.
    """
    with engine.connect() as conn:
        row = conn.execute(
            select(customer).where(customer.c.customer_id == customer_id)
        ).mappings().first()

    if row is None:
        raise NotFound("Customer not found")

    return CustomerOut(**row)
