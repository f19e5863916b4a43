from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Explicitly load .env file and override existing environment variables
# This ensures that values from .env take precedence over system-wide environment variables.
load_dotenv(override=True)

class Settings(BaseSettings):
    """Base settings for the fleet admin service."""

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Fleet Admin Service"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # CORS settings
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Database settings
    # Default values for local development, override these in .env file
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "fleet_admin"
    POSTGRES_PORT: int = 5432

    # Hosted databases hand out a full URL, use it directly when set
    DATABASE_URL: Optional[str] = None

    # JWT session settings
    JWT_SECRET_KEY: str = "your-secret-key"  # Change this in production
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30  # 30 days

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Object storage settings
    STORAGE_BACKEND: str = "local"  # 'local' or 'cloudinary'
    STORAGE_BUCKET: str = "vehicle-images"
    MEDIA_ROOT: str = "media"
    MEDIA_URL: str = "/media"
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None

    # Seed administrator created by setup_db.py
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    model_config = {
        "case_sensitive": True,
        "env_file": ".env"
    }

# Create settings instance
settings = Settings()
