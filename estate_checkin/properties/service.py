"""Business logic for properties."""
from typing import List

from estate_checkin.errors import PropertyNotFound
from estate_checkin.properties.schemas import Property
from estate_checkin.store import PropertyRepository


class PropertyService:
    def __init__(self, repository: PropertyRepository):
        self.repository = repository

    def list_properties(self) -> List[Property]:
        return self.repository.list_properties()

    def get_property(self, property_id: str) -> Property:
        prop = self.repository.get_property(property_id)
        if prop is None:
            raise PropertyNotFound()
        return prop
