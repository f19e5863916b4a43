from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.core.security import SessionData, staff_required
from app.db.session import get_db
from app.models.enums import VehicleType, TransmissionType, FuelType
from app.schemas.user import MessageResponse
from app.schemas.vehicle import VehicleCreate, VehicleResponse, VehicleUpdate
from app.services import vehicle_service
from app.services.storage import ObjectStorage, get_storage
from app.services.vehicle_service import ImageFile

import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def read_image(image: Optional[UploadFile]) -> Optional[ImageFile]:
    """Read an uploaded file; an empty file part counts as no image."""
    if image is None or not image.filename:
        return None
    content = image.file.read()
    if not content:
        return None
    return ImageFile(filename=image.filename, content=content, content_type=image.content_type)


@router.get("", response_model=List[VehicleResponse])
def list_vehicles(
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> List[VehicleResponse]:
    """
    List all vehicles with their owner summary, newest first.
    """
    return vehicle_service.list_vehicles(db)

@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    session: SessionData = Depends(staff_required),
    make: str = Form(...),
    model: str = Form(...),
    year: int = Form(...),
    licensePlate: str = Form(...),
    rentalRate: float = Form(..., ge=0),
    vehicle_type: VehicleType = Form(..., alias="type"),
    capacity: int = Form(..., gt=0),
    transmissionType: TransmissionType = Form(...),
    fuelType: FuelType = Form(...),
    dailyRate: float = Form(..., ge=0),
    lateFeePerDay: float = Form(..., ge=0),
    city: str = Form(...),
    description: Optional[str] = Form(None),
    isAvailable: bool = Form(False),
    address: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage)
) -> VehicleResponse:
    """
    Create a vehicle from a multipart form, with an optional image.

    The acting user becomes the owner. Returns 409 if the license plate is
    taken and 500 if the image upload fails; nothing is saved in either case.
    """
    vehicle_data = VehicleCreate(
        make=make,
        model=model,
        year=year,
        licensePlate=licensePlate,
        rentalRate=rentalRate,
        type=vehicle_type,
        capacity=capacity,
        transmissionType=transmissionType,
        fuelType=fuelType,
        dailyRate=dailyRate,
        lateFeePerDay=lateFeePerDay,
        city=city,
        description=description,
        isAvailable=isAvailable,
        address=address,
    )
    image_file = read_image(image)
    return vehicle_service.create_vehicle(db, storage, vehicle_data, session.id, image_file)

@router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(
    vehicle_id: str,
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> VehicleResponse:
    return vehicle_service.get_vehicle(db, vehicle_id)

@router.put("/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: str,
    _: SessionData = Depends(staff_required),
    make: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    year: Optional[int] = Form(None),
    licensePlate: Optional[str] = Form(None),
    rentalRate: Optional[float] = Form(None, ge=0),
    vehicle_type: Optional[VehicleType] = Form(None, alias="type"),
    capacity: Optional[int] = Form(None, gt=0),
    transmissionType: Optional[TransmissionType] = Form(None),
    fuelType: Optional[FuelType] = Form(None),
    dailyRate: Optional[float] = Form(None, ge=0),
    lateFeePerDay: Optional[float] = Form(None, ge=0),
    city: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    isAvailable: Optional[bool] = Form(None),
    address: Optional[str] = Form(None),
    removeExistingImage: bool = Form(False),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage)
) -> VehicleResponse:
    """
    Update some fields of a vehicle from a multipart form.

    Send removeExistingImage=true to drop the current image, or a new image
    file to replace it.
    """
    vehicle_data = VehicleUpdate(
        make=make,
        model=model,
        year=year,
        licensePlate=licensePlate,
        rentalRate=rentalRate,
        type=vehicle_type,
        capacity=capacity,
        transmissionType=transmissionType,
        fuelType=fuelType,
        dailyRate=dailyRate,
        lateFeePerDay=lateFeePerDay,
        city=city,
        description=description,
        isAvailable=isAvailable,
        address=address,
    )
    image_file = read_image(image)
    return vehicle_service.update_vehicle(
        db,
        storage,
        vehicle_id,
        vehicle_data,
        image=image_file,
        remove_existing_image=removeExistingImage,
    )

@router.delete("/{vehicle_id}", response_model=MessageResponse)
def delete_vehicle(
    vehicle_id: str,
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage)
) -> MessageResponse:
    label = vehicle_service.delete_vehicle(db, storage, vehicle_id)
    return MessageResponse(message=f"Vehicle {label} deleted successfully")
