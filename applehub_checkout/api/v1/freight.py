"""POST /v1/freight/quote - simulated shipping cost"""

import random
from fastapi import APIRouter, Depends, HTTPException

from applehub_checkout.api.v1.schemas import FreightQuoteRequest, FreightQuoteResponse
from applehub_checkout.domain.exceptions import InvalidCepError
from applehub_checkout.domain.freight import quote_freight

router = APIRouter()


def get_freight_rng() -> random.Random:
    return random.Random()


@router.post("/freight/quote", response_model=FreightQuoteResponse)
def create_freight_quote(request_body: FreightQuoteRequest, rng: random.Random = Depends(get_freight_rng)):
    try:
        quote = quote_freight(request_body.cep, request_body.mode, rng)
    except InvalidCepError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return FreightQuoteResponse(
        cep=quote.cep,
        mode=quote.mode,
        amount=round(quote.amount, 2),
        min_business_days=quote.min_business_days,
        max_business_days=quote.max_business_days,
    )
