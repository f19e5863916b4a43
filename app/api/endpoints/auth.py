from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import UnauthorizedError
from app.core.security import SessionData, create_access_token, require_session, verify_password
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserRegister, UserResponse
from app.services import user_service

import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
) -> UserResponse:
    """
    Public sign-up. New accounts are unverified customers.
    """
    return user_service.register_user(db, user_data)

@router.post("/auth/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
) -> TokenResponse:
    """
    Exchange email and password for a bearer session token.

    Accounts created through an external identity provider have no password
    and cannot sign in here.
    """
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not verify_password(credentials.password, user.password):
        logger.info("Rejected sign-in attempt")
        raise UnauthorizedError("Invalid email or password")

    token = create_access_token(user.id, user.role, user.isVerifiedByAdmin)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))

@router.get("/auth/session", response_model=SessionData)
def get_session(session: SessionData = Depends(require_session)) -> SessionData:
    """
    Return the identity carried by the caller's token.
    """
    return session
