"""Pydantic schemas for city lookup and address autocomplete."""

from pydantic import BaseModel
from typing import Optional


class CityOut(BaseModel):
    city: str
    state_id: Optional[str] = None
    state_name: Optional[str] = None
    lat: float
    lng: float
    population: Optional[int] = None


class AddressSuggestion(BaseModel):
    address: str
    lat: float
    lon: float
