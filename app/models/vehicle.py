"""
SQLAlchemy model for the vehicles table.
"""

from sqlalchemy import Column, String, Integer, Numeric, Boolean, Enum, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.db.base_model import BaseModel
from app.models.enums import VehicleType, TransmissionType, FuelType

class Vehicle(Base, BaseModel):
    """
    A rentable vehicle listed in the fleet.
    imageUrl points at an object in the vehicle image bucket.
    """
    __tablename__ = "vehicles"

    make = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    licensePlate = Column(String, unique=True, nullable=False, index=True)
    rentalRate = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    dailyRate = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    lateFeePerDay = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    description = Column(Text, nullable=True)
    isAvailable = Column(Boolean, nullable=False, default=True)
    type = Column(Enum(VehicleType, name="vehicle_type"), nullable=False)
    capacity = Column(Integer, nullable=False)
    transmissionType = Column(Enum(TransmissionType, name="transmission_type"), nullable=False)
    fuelType = Column(Enum(FuelType, name="fuel_type"), nullable=False)
    city = Column(String, nullable=False)
    address = Column(Text, nullable=True)
    imageUrl = Column(String, nullable=True)
    ownerId = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Define relationships
    owner = relationship("User", back_populates="vehicles")

    def __repr__(self):
        return f"<Vehicle {self.make} {self.model} ({self.licensePlate})>"
