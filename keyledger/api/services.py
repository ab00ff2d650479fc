# keyledger/api/services.py

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.engine import Engine

from keyledger.core.totals import round_cents
from keyledger.core.transaction import transaction
from keyledger.db.engine import get_engine
from keyledger.db.schema import services
from keyledger.errors import NotFound
from keyledger.models.services import (
    ServiceIn,
    ServiceListResponse,
    ServiceOut,
    ServiceUpdate,
)

router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=ServiceListResponse)
def list_services(engine: Engine = Depends(get_engine)) -> ServiceListResponse:
    """
    Return the service catalog ordered by name.
    """
    with engine.connect() as conn:
        rows = conn.execute(
            select(services).order_by(services.c.servicename)
        ).mappings().all()

    return ServiceListResponse(services=[ServiceOut(**row) for row in rows])


@router.post("", response_model=ServiceOut, status_code=201)
def create_service(body: ServiceIn, engine: Engine = Depends(get_engine)) -> ServiceOut:
    with transaction(engine, "create service") as conn:
        result = conn.execute(
            services.insert().values(
                servicename=body.servicename.strip(),
                description=body.description,
                unitprice=round_cents(body.unitprice),
                istaxed=bool(body.istaxed),
                isparts=bool(body.isparts),
            )
        )
        service_id = result.inserted_primary_key[0]
        row = conn.execute(
            select(services).where(services.c.service_id == service_id)
        ).mappings().one()

    return ServiceOut(**row)


@router.put("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int, body: ServiceUpdate, engine: Engine = Depends(get_engine)
) -> ServiceOut:
    """
    Update a catalog entry in place.

    Existing invoice and quote lines keep the unit price they were saved with.
    """
    with transaction(engine, "update service") as conn:
        result = conn.execute(
            services.update()
            .where(services.c.service_id == service_id)
            .values(
                description=body.description,
                unitprice=round_cents(body.unitprice),
                istaxed=bool(body.istaxed),
                isparts=bool(body.isparts),
            )
        )
        if result.rowcount == 0:
            raise NotFound("Service not found")

        row = conn.execute(
            select(services).where(services.c.service_id == service_id)
        ).mappings().one()

    return ServiceOut(**row)
