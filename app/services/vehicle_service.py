"""
Vehicle resource operations, including the image lifecycle.

Storage side effects always happen before the database commit. The two stores
share no transaction, so two rules keep them close to consistent:

- Deleting an old image is best effort. A failed delete is logged and the
  request carries on, which can leave an orphaned object in the bucket.
- A freshly uploaded image is deleted again if the database write that
  should reference it fails.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    UpstreamError,
)
from app.models.user import User
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from app.services.storage import ObjectStorage, StorageError, build_object_path

logger = logging.getLogger(__name__)

PLATE_EXISTS = "Vehicle with this license plate already exists"
PLATE_IN_USE = "License plate already in use by another vehicle"


@dataclass
class ImageFile:
    """An uploaded image read into memory."""
    filename: Optional[str]
    content: bytes
    content_type: Optional[str] = None


def discard_image(storage: ObjectStorage, image_url: Optional[str]) -> bool:
    """
    Best-effort removal of a stored image.

    Returns False when the object could not be removed. Callers ignore the
    result on purpose; the failure is only logged.
    """
    path = storage.path_from_url(image_url)
    if not path:
        if image_url:
            logger.warning(f"Cannot map image URL to a storage path: {image_url}")
        return False
    try:
        storage.delete(path)
    except StorageError as e:
        logger.warning(f"Failed to delete image '{path}' from storage: {e}")
        return False
    logger.info(f"Deleted image '{path}' from storage")
    return True


def upload_image(storage: ObjectStorage, image: ImageFile) -> str:
    """Upload under a fresh unique path and return the public URL."""
    path = build_object_path(image.filename)
    try:
        url = storage.upload(path, image.content, image.content_type)
    except StorageError as e:
        logger.error(f"Failed to upload image '{path}': {e}")
        raise UpstreamError("Failed to upload image")
    logger.info(f"Uploaded image '{path}'")
    return url


def _commit(db: Session, storage: ObjectStorage, uploaded_url: Optional[str], conflict_message: str) -> None:
    """Commit the pending write, rolling back the fresh upload if it fails."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if uploaded_url:
            discard_image(storage, uploaded_url)
        logger.warning(f"Unique constraint rejected write: {conflict_message}")
        raise ConflictError(conflict_message)
    except SQLAlchemyError:
        db.rollback()
        if uploaded_url:
            discard_image(storage, uploaded_url)
        logger.exception("Database error while writing vehicle")
        raise InternalError()


def _plate_owner(db: Session, license_plate: str) -> Optional[str]:
    row = db.query(Vehicle.id).filter(Vehicle.licensePlate == license_plate).first()
    return row[0] if row else None


def list_vehicles(db: Session) -> List[Vehicle]:
    return (
        db.query(Vehicle)
        .options(joinedload(Vehicle.owner))
        .order_by(Vehicle.createdAt.desc())
        .all()
    )


def get_vehicle(db: Session, vehicle_id: str) -> Vehicle:
    vehicle = (
        db.query(Vehicle)
        .options(joinedload(Vehicle.owner))
        .filter(Vehicle.id == vehicle_id)
        .first()
    )
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return vehicle


def create_vehicle(
    db: Session,
    storage: ObjectStorage,
    data: VehicleCreate,
    owner_id: str,
    image: Optional[ImageFile] = None,
) -> Vehicle:
    """
    Create a vehicle owned by the acting user.

    The image, if any, is uploaded first; an upload failure aborts before
    anything is written.
    """
    if _plate_owner(db, data.licensePlate):
        raise ConflictError(PLATE_EXISTS)

    if not db.query(User.id).filter(User.id == owner_id).first():
        raise NotFoundError("Owner not found")

    image_url = upload_image(storage, image) if image else None

    vehicle = Vehicle(**data.model_dump(), imageUrl=image_url, ownerId=owner_id)
    db.add(vehicle)
    _commit(db, storage, image_url, PLATE_EXISTS)
    db.refresh(vehicle)

    logger.info(f"Created vehicle {vehicle.id} ({vehicle.licensePlate}) for owner {owner_id}")
    return vehicle


def update_vehicle(
    db: Session,
    storage: ObjectStorage,
    vehicle_id: str,
    data: VehicleUpdate,
    image: Optional[ImageFile] = None,
    remove_existing_image: bool = False,
) -> Vehicle:
    """
    Apply a partial update.

    Image handling, first matching branch wins:
    1. removal requested and an image exists: drop it, null the reference
    2. a new image supplied: drop the old one, upload the new one
    3. otherwise the reference is kept
    """
    vehicle = get_vehicle(db, vehicle_id)
    changes = {field: value for field, value in data.model_dump(exclude_unset=True).items() if value is not None}

    new_plate = changes.get("licensePlate")
    if new_plate and new_plate != vehicle.licensePlate:
        holder = _plate_owner(db, new_plate)
        if holder and holder != vehicle.id:
            raise ConflictError(PLATE_IN_USE)

    uploaded_url = None
    if remove_existing_image and vehicle.imageUrl:
        discard_image(storage, vehicle.imageUrl)
        changes["imageUrl"] = None
    elif image:
        if vehicle.imageUrl:
            discard_image(storage, vehicle.imageUrl)
        uploaded_url = upload_image(storage, image)
        changes["imageUrl"] = uploaded_url

    for field, value in changes.items():
        setattr(vehicle, field, value)

    _commit(db, storage, uploaded_url, PLATE_IN_USE)
    db.refresh(vehicle)

    logger.info(f"Updated vehicle {vehicle.id}")
    return vehicle


def delete_vehicle(db: Session, storage: ObjectStorage, vehicle_id: str) -> str:
    """Delete a vehicle and its stored image. Returns a display name."""
    vehicle = get_vehicle(db, vehicle_id)
    label = f"{vehicle.make} {vehicle.model}"

    if vehicle.imageUrl:
        discard_image(storage, vehicle.imageUrl)

    db.delete(vehicle)
    _commit(db, storage, None, f"Vehicle {label} is still referenced")

    logger.info(f"Deleted vehicle {vehicle_id}")
    return label
