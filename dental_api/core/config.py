from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Dental Clinic API"
    VERSION: str = "2.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Document store (SQLAlchemy URL)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./dental_clinic.db")
    TEST_DATABASE_URL: str = os.getenv("TEST_DATABASE_URL", "sqlite://")
    DB_POOL_TIMEOUT: int = 30

    # Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    # Booking lock ("local" for a single process, "redis" across workers)
    BOOKING_LOCK_BACKEND: str = "local"
    REDIS_URL: str = "redis://localhost:6379"
    BOOKING_LOCK_TIMEOUT: int = 10
    BOOKING_LOCK_BLOCKING_TIMEOUT: int = 5

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173", "http://testserver"]

    @property
    def get_database_url(self):
        """Return the appropriate database URL based on if we're testing"""
        if self.TESTING:
            return self.TEST_DATABASE_URL
        return self.DATABASE_URL

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
