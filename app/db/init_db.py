import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.db.session import Base, SessionLocal, engine
from app.models.enums import Role
from app.models.user import User
from app.models.vehicle import Vehicle

logger = logging.getLogger(__name__)

def init_db():
    """
    Initialize the database by creating the users and vehicles tables.
    Existing tables are left untouched.
    """
    try:
        tables = [User.__table__, Vehicle.__table__]
        Base.metadata.create_all(bind=engine, tables=tables, checkfirst=True)
        for table in tables:
            logger.info(f"Table {table.name} ready")
    except SQLAlchemyError as e:
        logger.error(f"Error creating database tables: {e}")
        raise

def seed_admin(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """
    Create a verified ADMIN account if none exists for the email.
    Returns the new user, or None when nothing was created.
    """
    if not email or not password:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin seed")
        return None

    if db.query(User).filter(User.email == email).first():
        logger.info(f"Admin account {email} already exists")
        return None

    admin = User(
        name="Administrator",
        email=email,
        password=hash_password(password),
        role=Role.ADMIN,
        isVerifiedByAdmin=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Seeded admin account {email}")
    return admin

def init_data():
    """Seed the administrator configured in settings."""
    db = SessionLocal()
    try:
        seed_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    finally:
        db.close()
