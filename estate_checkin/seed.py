"""Sample directory data loaded into a fresh store."""
import logging

from estate_checkin.participants.schemas import Participant
from estate_checkin.properties.schemas import Property
from estate_checkin.schemas import Coordinates
from estate_checkin.store import Store

logger = logging.getLogger(__name__)

SAMPLE_PARTICIPANTS = [
    Participant(id="user-1", name="John Smith", email="john.smith@example.com", role="agent"),
    Participant(id="user-2", name="Emily Johnson", email="emily.johnson@example.com", role="agent"),
    Participant(id="user-3", name="Michael Brown", email="michael.brown@example.com", role="client"),
    Participant(id="user-4", name="Sarah Davis", email="sarah.davis@example.com", role="client"),
    Participant(id="user-5", name="Robert Wilson", email="robert.wilson@example.com", role="admin"),
]

SAMPLE_PROPERTIES = [
    Property(
        id="prop-1",
        address="123 Main Street",
        city="Los Angeles",
        state="CA",
        zip_code="90001",
        price=1250000,
        type="Single Family Home",
        coordinates=Coordinates(lat=34.052235, lng=-118.243683),
    ),
    Property(
        id="prop-2",
        address="456 Ocean Avenue",
        city="San Francisco",
        state="CA",
        zip_code="94102",
        price=1875000,
        type="Condo",
        coordinates=Coordinates(lat=37.774929, lng=-122.419416),
    ),
    Property(
        id="prop-3",
        address="789 Desert Road",
        city="Phoenix",
        state="AZ",
        zip_code="85001",
        price=750000,
        type="Single Family Home",
        coordinates=Coordinates(lat=33.448376, lng=-112.074036),
    ),
    Property(
        id="prop-4",
        address="321 Lake View",
        city="Chicago",
        state="IL",
        zip_code="60601",
        price=950000,
        type="Apartment",
        coordinates=Coordinates(lat=41.878113, lng=-87.629799),
    ),
    Property(
        id="prop-5",
        address="555 Park Lane",
        city="New York",
        state="NY",
        zip_code="10001",
        price=2500000,
        type="Condo",
        coordinates=Coordinates(lat=40.712776, lng=-74.005974),
    ),
]


def seed_store(store: Store) -> None:
    """Add sample participants and properties that are not present yet."""
    added = 0
    for participant in SAMPLE_PARTICIPANTS:
        if store.participants.get_participant(participant.id) is None:
            store.participants.add_participant(participant)
            added += 1
    for prop in SAMPLE_PROPERTIES:
        if store.properties.get_property(prop.id) is None:
            store.properties.add_property(prop)
            added += 1
    logger.info(f"Seeded {added} sample records")
