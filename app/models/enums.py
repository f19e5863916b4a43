"""
Enumerations shared by the SQLAlchemy models and the API schemas.
"""

import enum


class Role(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    OWNER = "OWNER"
    ADMIN = "ADMIN"


class VehicleType(str, enum.Enum):
    SUV = "SUV"
    MPV = "MPV"
    SEDAN = "SEDAN"
    HATCHBACK = "HATCHBACK"
    SPORT = "SPORT"
    TRUCK = "TRUCK"
    MOTORCYCLE = "MOTORCYCLE"
    OTHER = "OTHER"


class TransmissionType(str, enum.Enum):
    MANUAL = "MANUAL"
    AUTOMATIC = "AUTOMATIC"


class FuelType(str, enum.Enum):
    GASOLINE = "GASOLINE"
    DIESEL = "DIESEL"
    ELECTRIC = "ELECTRIC"
    HYBRID = "HYBRID"


# Roles allowed to manage users and vehicles
STAFF_ROLES = (Role.ADMIN, Role.OWNER)
