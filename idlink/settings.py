import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(__file__)
PROJECT_DIR = os.path.dirname(BASE_DIR)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./idlink.db")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Absolute base for links handed to the dashboard, e.g. mail previews
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]

# File storage
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(PROJECT_DIR, "uploads"))
MAIL_PREVIEW_DIR = os.getenv("MAIL_PREVIEW_DIR", os.path.join(PROJECT_DIR, "mail_previews"))

# Mail settings
MAIL_MODE = os.getenv("MAIL_MODE")  # unconfigured | smtp | sandbox, auto-detected when unset
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")
SMTP_SECURE = os.getenv("SMTP_SECURE", "false").lower() == "true"
SMTP_TIMEOUT = int(os.getenv("SMTP_TIMEOUT", "10"))
FROM_EMAIL = os.getenv("FROM_EMAIL") or SMTP_USER or "no-reply@idlink.edu"
