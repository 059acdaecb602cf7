"""
Horoscope API Router - public read endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from todays_horoscope.api.deps import check_rate_limit, get_horoscope_service
from todays_horoscope.services.horoscope_service import HoroscopeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Horoscope"])

NO_STORE = {"Cache-Control": "no-store"}


@router.get("/horoscope", dependencies=[Depends(check_rate_limit)])
async def get_horoscope(
    sign: Optional[str] = Query(None),
    type: Optional[str] = Query("daily"),
    timezone: Optional[str] = Query(None),
    service: HoroscopeService = Depends(get_horoscope_service),
) -> JSONResponse:
    """
    Get the horoscope for one sign.

    Query:
        - sign: zodiac sign (aries ... pisces)
        - type: daily | weekly | monthly
        - timezone: IANA timezone; invalid values fall back to UTC

    InvalidInput (400) and GenerationFailed (500) are rendered by the
    application's exception handlers.
    """
    result = await service.get_horoscope(sign, type, timezone)
    return JSONResponse(content=result.to_response(), headers=NO_STORE)


@router.get("/horoscopes")
async def get_all_horoscopes(
    type: Optional[str] = Query("daily"),
    timezone: Optional[str] = Query(None),
    service: HoroscopeService = Depends(get_horoscope_service),
) -> JSONResponse:
    """
    Get every sign's horoscope. Signs that could not be produced are null so
    the page can show them as still loading.
    """
    horoscopes = await service.get_all_horoscopes(type, timezone)
    available = [sign for sign, result in horoscopes.items() if result is not None]
    logger.info(f"Served {len(available)}/{len(horoscopes)} horoscopes")

    return JSONResponse(
        content={
            "success": True,
            "signs": [
                {
                    "sign": sign.value,
                    "name": sign.display_name,
                    "element": sign.element.value,
                    "dateRange": sign.date_range,
                }
                for sign in service.ordered_signs()
            ],
            "horoscopes": {
                sign: result.data.model_dump(mode="json") if result else None
                for sign, result in horoscopes.items()
            },
            "cached": {
                sign: result.served_from_cache
                for sign, result in horoscopes.items()
                if result is not None
            },
        },
        headers=NO_STORE,
    )
