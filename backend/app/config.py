# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Hoaxify API"
    # Create missing tables on startup (local development only, Aerich otherwise)
    generate_schemas: bool = os.getenv("GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:8080",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Profile image storage (served under /images)
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    profile_dir: str = os.getenv("PROFILE_DIR", "profile")

    # Session tokens
    # A token unused for longer than this is expired (sliding window)
    token_expiry_days: int = int(os.getenv("TOKEN_EXPIRY_DAYS", "7"))
    # Background sweep for abandoned tokens
    token_cleanup_interval_minutes: int = int(os.getenv("TOKEN_CLEANUP_INTERVAL_MINUTES", "60"))

    # SMTP Settings (activation and password reset mails)
    smtp_host: str = os.getenv("SMTP_HOST", "localhost")
    smtp_port: int = int(os.getenv("SMTP_PORT", "8587"))
    smtp_user: str | None = os.getenv("SMTP_USER")
    smtp_password: str | None = os.getenv("SMTP_PASSWORD")
    mail_from: str = os.getenv("MAIL_FROM", "My App <info@my-app.com>")

    # Links placed into mails point at the frontend
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:8080")

settings = Settings()  # Instantiate configuration
