from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.security import SessionData, staff_required
from app.db.session import get_db
from app.schemas.user import MessageResponse, UserCreate, UserResponse, UserUpdate
from app.services import user_service

router = APIRouter()

# The role guard is declared before the database dependency in every handler,
# so a rejected caller never opens a session.

@router.get("", response_model=List[UserResponse])
def list_users(
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> List[UserResponse]:
    """
    List all users, newest first. Passwords are never included.
    """
    return user_service.list_users(db)

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> UserResponse:
    """
    Create a user account with a hashed password.

    Email, password and role are required. Returns 409 if the email is taken.
    """
    return user_service.create_user(db, user_data)

@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> UserResponse:
    return user_service.get_user(db, user_id)

@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    user_data: UserUpdate,
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> UserResponse:
    """
    Update some fields of a user.

    A non-empty password is re-hashed; an empty or missing one keeps the
    current hash.
    """
    return user_service.update_user(db, user_id, user_data)

@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    _: SessionData = Depends(staff_required),
    db: Session = Depends(get_db)
) -> MessageResponse:
    email = user_service.delete_user(db, user_id)
    return MessageResponse(message=f"User {email} deleted successfully")
