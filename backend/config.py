"""
Certification enrollment service settings
"""
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # App
    APP_NAME: str = "Certification Enrollment Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database (named DB_URL to avoid clashing with hosting env vars)
    DB_URL: str = "sqlite+aiosqlite:///./data/enrollment.db"

    # JWT
    SECRET_KEY: str = "your-super-secret-key-change-in-production-32chars"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24h
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Razorpay
    RAZORPAY_KEY_ID: str = "rzp_test_key"
    RAZORPAY_KEY_SECRET: str = "rzp_test_secret"
    RAZORPAY_WEBHOOK_SECRET: str = "rzp-webhook-secret-change-in-production"
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    RAZORPAY_FUND_ACCOUNT_NUMBER: str = ""
    GATEWAY_TIMEOUT: int = 30  # seconds

    # Typeform (signature check is skipped when unset)
    TYPEFORM_SECRET: Optional[str] = None

    # Lesson generation key, carried as opaque config only
    AI_CONTENT_API_KEY: Optional[str] = None

    # Notifications
    NOTIFICATION_BATCH_SIZE: int = 1000

    # Center onboarding
    REFERRAL_CODE_ATTEMPTS: int = 5
    CENTER_DEFAULT_CAPACITY: int = 50

    # Enrollment plans (amounts in paise)
    ENROLLMENT_PLANS: dict = {
        "full": {
            "name": "Full payment",
            "price": 1500000,
            "installments": 1,
        },
        "emi_3": {
            "name": "3-month EMI",
            "price": 520000,
            "installments": 3,
        },
        "emi_6": {
            "name": "6-month EMI",
            "price": 265000,
            "installments": 6,
        },
    }

    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging
    LOG_LEVEL: str = "DEBUG"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env.backend"
        case_sensitive = True
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Return the settings singleton"""
    return Settings()


settings = get_settings()
