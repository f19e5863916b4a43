from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime

from app.models.enums import VehicleType, TransmissionType, FuelType
from app.schemas.user import OwnerSummary

class VehicleCreate(BaseModel):
    """Schema for creating a vehicle. Built from the multipart form fields."""
    make: str = Field(..., min_length=1, description="Manufacturer (e.g., 'Toyota')")
    model: str = Field(..., min_length=1, description="Model name (e.g., 'Avanza')")
    year: int = Field(..., description="Manufacturing year")
    licensePlate: str = Field(..., min_length=1, description="Unique license plate")
    rentalRate: float = Field(..., ge=0, description="Base rental rate")
    type: VehicleType = Field(..., description="Body type")
    capacity: int = Field(..., gt=0, description="Passenger capacity")
    transmissionType: TransmissionType = Field(..., description="Transmission type")
    fuelType: FuelType = Field(..., description="Fuel type")
    dailyRate: float = Field(..., ge=0, description="Rate per rental day")
    lateFeePerDay: float = Field(..., ge=0, description="Fee per day of late return")
    city: str = Field(..., min_length=1, description="City where the vehicle is kept")
    description: Optional[str] = Field(None, description="Free-form listing description")
    isAvailable: bool = Field(False, description="Whether the vehicle can be rented")
    address: Optional[str] = Field(None, description="Pick-up address")

class VehicleUpdate(BaseModel):
    """Schema for partial vehicle updates. None means 'leave unchanged'."""
    make: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    year: Optional[int] = None
    licensePlate: Optional[str] = Field(None, min_length=1)
    rentalRate: Optional[float] = Field(None, ge=0)
    type: Optional[VehicleType] = None
    capacity: Optional[int] = Field(None, gt=0)
    transmissionType: Optional[TransmissionType] = None
    fuelType: Optional[FuelType] = None
    dailyRate: Optional[float] = Field(None, ge=0)
    lateFeePerDay: Optional[float] = Field(None, ge=0)
    city: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    isAvailable: Optional[bool] = None
    address: Optional[str] = None

class VehicleResponse(BaseModel):
    """Schema for returning a vehicle with its owner summary."""
    id: str
    make: str
    model: str
    year: int
    licensePlate: str
    rentalRate: float
    dailyRate: float
    lateFeePerDay: float
    description: Optional[str] = None
    isAvailable: bool
    type: VehicleType
    capacity: int
    transmissionType: TransmissionType
    fuelType: FuelType
    city: str
    address: Optional[str] = None
    imageUrl: Optional[str] = None
    ownerId: str
    owner: Optional[OwnerSummary] = None
    createdAt: datetime
    updatedAt: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "8a0e3c1d-2b4f-4c6e-9a8b-7c6d5e4f3a2b",
                "make": "Toyota",
                "model": "Avanza",
                "year": 2022,
                "licensePlate": "B1234XYZ",
                "rentalRate": 50.0,
                "dailyRate": 75.0,
                "lateFeePerDay": 10.0,
                "description": None,
                "isAvailable": True,
                "type": "MPV",
                "capacity": 7,
                "transmissionType": "AUTOMATIC",
                "fuelType": "GASOLINE",
                "city": "Jakarta",
                "address": None,
                "imageUrl": "/media/vehicle-images/vehicles/1f0e.jpg",
                "ownerId": "2f1c0a6e-6b7e-4a3a-9d55-0e7f1f5b9c11",
                "owner": {
                    "id": "2f1c0a6e-6b7e-4a3a-9d55-0e7f1f5b9c11",
                    "name": "Budi Santoso",
                    "email": "budi@example.com"
                },
                "createdAt": "2024-05-01T12:00:00Z",
                "updatedAt": "2024-05-01T12:00:00Z"
            }
        }
    }
