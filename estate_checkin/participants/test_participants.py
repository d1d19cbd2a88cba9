"""Unit tests for participants functionality."""
import pytest
from pydantic import ValidationError

from estate_checkin.errors import ParticipantNotFound, PropertyNotFound
from estate_checkin.participants.schemas import Participant, ParticipantCreate, ParticipantRole
from estate_checkin.properties.service import PropertyService
from .service import ParticipantService


class TestParticipantSchemas:
    def test_role_defaults_to_other(self):
        participant = Participant(id="p1", name="Dana Lee", email="dana@example.com")
        assert participant.role == ParticipantRole.other

    def test_name_and_email_are_stripped(self):
        participant = Participant(id="p1", name="  Dana Lee ", email=" dana@example.com ")
        assert participant.name == "Dana Lee"
        assert participant.email == "dana@example.com"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Participant(id="p1", name="   ", email="dana@example.com")

    @pytest.mark.parametrize("email", ["dana.example.com", "@example.com", "dana@"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            Participant(id="p1", name="Dana Lee", email=email)

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            Participant(id="p1", name="Dana Lee", email="dana@example.com", role="landlord")


class TestParticipantService:
    """Test cases for participant service."""

    def test_get_participant(self, store):
        service = ParticipantService(store.participants)
        assert service.get_participant("user-5").role == ParticipantRole.admin

    def test_get_unknown_participant(self, store):
        with pytest.raises(ParticipantNotFound):
            ParticipantService(store.participants).get_participant("nobody")

    def test_create_generates_id(self, store):
        service = ParticipantService(store.participants)
        created = service.create_participant(
            ParticipantCreate(name="Dana Lee", email="dana@example.com", role="client")
        )
        assert created.id
        assert service.get_participant(created.id) == created
        assert len(service.list_participants()) == 6

    def test_create_keeps_given_id(self, store):
        created = ParticipantService(store.participants).create_participant(
            ParticipantCreate(id="user-9", name="Dana Lee", email="dana@example.com")
        )
        assert created.id == "user-9"


class TestPropertyService:
    def test_get_property(self, store):
        prop = PropertyService(store.properties).get_property("prop-3")
        assert prop.full_address == "789 Desert Road, Phoenix, AZ 85001"

    def test_get_unknown_property(self, store):
        with pytest.raises(PropertyNotFound):
            PropertyService(store.properties).get_property("prop-404")
