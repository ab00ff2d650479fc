# keyledger/api/vin.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from keyledger.api.deps import get_vin_decoder
from keyledger.core.vin import VinDecoder

router = APIRouter(tags=["vin"])


@router.get("/vin-decode")
def decode_vin(
    vin: Optional[str] = Query(default=None),
    decoder: VinDecoder = Depends(get_vin_decoder),
) -> dict:
    data, source = decoder.decode(vin)
    return {"data": data, "source": source}
