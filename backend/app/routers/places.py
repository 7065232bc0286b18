"""Places API router: city lookup and address autocomplete."""

from fastapi import APIRouter, Query, Response, status
from typing import List
from app.schemas.place import AddressSuggestion, CityOut
from app.services import city_service, geocoding_service

router = APIRouter(prefix="/api/places", tags=["places"])


@router.get("/cities", response_model=List[CityOut])
def search_cities(city: str = Query(..., min_length=1)):
    matches = city_service.search_cities(city)
    if not matches:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return matches


@router.get("/autocomplete", response_model=List[AddressSuggestion])
def autocomplete(query: str = Query(..., min_length=1)):
    return geocoding_service.autocomplete(query)
