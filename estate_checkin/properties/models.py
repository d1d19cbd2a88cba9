"""SQLAlchemy models for properties."""

from sqlalchemy import Column, Float, String

from estate_checkin.db import Base


class PropertyRow(Base):
    """Listed property."""

    __tablename__ = "properties"

    id = Column(String(64), primary_key=True)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(20), nullable=False)
    price = Column(Float, nullable=True)
    type = Column(String(100), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
