from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

from app.models.enums import Role

class UserCreate(BaseModel):
    """Schema for creating a user from the admin dashboard."""
    name: Optional[str] = Field(None, description="Display name")
    email: EmailStr = Field(..., description="Unique login email")
    password: str = Field(..., min_length=1, description="Plaintext password, hashed before storage")
    role: Role = Field(..., description="CUSTOMER, OWNER or ADMIN")
    phoneNumber: Optional[str] = Field(None, description="Contact phone number")
    address: Optional[str] = Field(None, description="Postal address")
    isVerifiedByAdmin: Optional[bool] = Field(False, description="Whether an administrator verified the account")

class UserUpdate(BaseModel):
    """Schema for partial user updates. Omitted fields are left untouched."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, description="New password; empty or omitted keeps the current one")
    role: Optional[Role] = None
    phoneNumber: Optional[str] = None
    address: Optional[str] = None
    isVerifiedByAdmin: Optional[bool] = None

class UserRegister(BaseModel):
    """Schema for self-service registration."""
    name: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=1)

class UserResponse(BaseModel):
    """Schema for returning a user. Never carries the password."""
    id: str
    name: Optional[str] = None
    email: str
    role: Role
    isVerifiedByAdmin: bool
    phoneNumber: Optional[str] = None
    address: Optional[str] = None
    image: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "2f1c0a6e-6b7e-4a3a-9d55-0e7f1f5b9c11",
                "name": "Budi Santoso",
                "email": "budi@example.com",
                "role": "OWNER",
                "isVerifiedByAdmin": True,
                "phoneNumber": "+62 812 0000 0000",
                "address": "Jl. Sudirman 1, Jakarta",
                "image": None,
                "createdAt": "2024-05-01T12:00:00Z",
                "updatedAt": "2024-05-01T12:00:00Z"
            }
        }
    }

class OwnerSummary(BaseModel):
    """The slice of a user embedded in vehicle responses."""
    id: str
    name: Optional[str] = None
    email: str

    model_config = {
        "from_attributes": True
    }

class MessageResponse(BaseModel):
    message: str
