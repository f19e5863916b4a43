from pydantic import BaseModel, EmailStr, Field

from app.schemas.user import UserResponse

class LoginRequest(BaseModel):
    """Credentials for the email/password sign-in."""
    email: EmailStr
    password: str = Field(..., min_length=1)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
