"""
User resource operations: list, fetch, create, update and delete accounts.
"""

from typing import List

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import ConflictError, InternalError, NotFoundError
from app.core.security import hash_password
from app.models.enums import Role
from app.models.user import User
from app.models.vehicle import Vehicle
from app.schemas.user import UserCreate, UserRegister, UserUpdate

import logging
logger = logging.getLogger(__name__)

# Columns that may be cleared by sending null
NULLABLE_FIELDS = {"name", "phoneNumber", "address"}


def _commit(db: Session, conflict_message: str) -> None:
    """Commit, translating store failures into service errors."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Unique constraint rejected write: {conflict_message}")
        raise ConflictError(conflict_message)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while writing user")
        raise InternalError()


def _email_taken(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.createdAt.desc()).all()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, data: UserCreate) -> User:
    """
    Create an account on behalf of an administrator.

    The email is checked up front, and the unique constraint catches the
    case where a concurrent request wins the race.
    """
    if _email_taken(db, data.email):
        raise ConflictError("User with this email already exists")

    user = User(
        name=data.name,
        email=data.email,
        password=hash_password(data.password),
        role=data.role,
        phoneNumber=data.phoneNumber,
        address=data.address,
        isVerifiedByAdmin=bool(data.isVerifiedByAdmin),
    )
    db.add(user)
    _commit(db, "User with this email already exists")
    db.refresh(user)

    logger.info(f"Created user {user.id} with role {user.role.value}")
    return user


def register_user(db: Session, data: UserRegister) -> User:
    """Self-service sign-up. New accounts are unverified customers."""
    return create_user(
        db,
        UserCreate(
            name=data.name,
            email=data.email,
            password=data.password,
            role=Role.CUSTOMER,
            isVerifiedByAdmin=False,
        ),
    )


def update_user(db: Session, user_id: str, data: UserUpdate) -> User:
    user = get_user(db, user_id)

    changes = data.model_dump(exclude_unset=True)
    password = changes.pop("password", None)

    if changes.get("email") and changes["email"] != user.email and _email_taken(db, changes["email"]):
        raise ConflictError("User with this email already exists")

    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(user, field, value)

    if password:
        user.password = hash_password(password)

    _commit(db, "User with this email already exists")
    db.refresh(user)

    logger.info(f"Updated user {user.id}")
    return user


def delete_user(db: Session, user_id: str) -> str:
    """Hard-delete a user. Returns the email of the removed account."""
    user = get_user(db, user_id)

    owned = db.query(Vehicle.id).filter(Vehicle.ownerId == user.id).count()
    if owned:
        raise ConflictError(f"User {user.email} still owns {owned} vehicle(s)")

    email = user.email
    db.delete(user)
    _commit(db, f"User {email} is still referenced")

    logger.info(f"Deleted user {user_id}")
    return email
