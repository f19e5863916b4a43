"""
SQLAlchemy model for the users table.
"""

from sqlalchemy import Column, String, Boolean, Enum, Text
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.db.base_model import BaseModel
from app.models.enums import Role

class User(Base, BaseModel):
    """
    Staff and customer accounts.
    The password column holds a bcrypt hash and is empty for accounts that
    only sign in through an external identity provider.
    """
    __tablename__ = "users"

    name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=True)
    role = Column(Enum(Role, name="role"), nullable=False, default=Role.CUSTOMER)
    isVerifiedByAdmin = Column(Boolean, nullable=False, default=False)
    phoneNumber = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    image = Column(String, nullable=True)  # Avatar URL

    # Define relationships
    vehicles = relationship("Vehicle", back_populates="owner")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value if self.role else None})>"
