# File: backend/app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

SARABUN_BASE_URL = "https://github.com/cadsondemak/Sarabun/raw/master/fonts/ttf"


class Settings:
    PROJECT_NAME: str = "Job Application API"
    PROJECT_VERSION: str = "1.0.0"

    # SMTP settings
    SMTP_HOST: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASS: str = os.getenv("EMAIL_PASS", "")
    EMAIL_TIMEOUT: float = float(os.getenv("EMAIL_TIMEOUT", "30"))

    # "smtp" or "sendgrid"
    EMAIL_TRANSPORT: str = os.getenv("EMAIL_TRANSPORT", "smtp").lower()
    SENDGRID_API_KEY: str = os.getenv("SENDGRID_API_KEY", "")

    # Recipients / branding
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    COMPANY_NAME: str = os.getenv("COMPANY_NAME", "HR Department")

    # Font settings (Sarabun covers Thai + Latin)
    FONT_DIR: str = os.getenv("FONT_DIR", "")
    FONT_REGULAR_URL: str = os.getenv("FONT_REGULAR_URL", f"{SARABUN_BASE_URL}/Sarabun-Regular.ttf")
    FONT_BOLD_URL: str = os.getenv("FONT_BOLD_URL", f"{SARABUN_BASE_URL}/Sarabun-Bold.ttf")
    FONT_DOWNLOAD_TIMEOUT: float = float(os.getenv("FONT_DOWNLOAD_TIMEOUT", "10"))

    # CORS settings
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "*").split(",")


settings = Settings()
