"""SQLAlchemy models for participants."""

from sqlalchemy import Column, String

from estate_checkin.db import Base


class ParticipantRow(Base):
    """Participant directory entry."""

    __tablename__ = "participants"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=False, index=True)
    role = Column(String(20), nullable=False)
