"""Pydantic schemas for properties."""
from typing import List, Optional

from pydantic import Field

from estate_checkin.schemas import CamelModel, Coordinates


class Property(CamelModel):
    """Listed property an event can be linked to."""
    id: str
    address: str = Field(..., min_length=1)
    city: str
    state: str
    zip_code: str
    price: Optional[float] = Field(None, ge=0)
    type: Optional[str] = None
    coordinates: Coordinates

    @property
    def full_address(self) -> str:
        return f"{self.address}, {self.city}, {self.state} {self.zip_code}"


class PropertyListResponse(CamelModel):
    properties: List[Property]
    total: int
