"""
Import all models from their respective modules.
"""

from app.models.enums import Role, VehicleType, TransmissionType, FuelType
from app.models.user import User
from app.models.vehicle import Vehicle

# Export all models
__all__ = [
    "Role",
    "VehicleType",
    "TransmissionType",
    "FuelType",
    "User",
    "Vehicle",
]
