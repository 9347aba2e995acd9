# storeit/config.py
import os
from dotenv import load_dotenv

load_dotenv()

APP_URL = os.getenv("APP_URL", "http://localhost:8000").rstrip("/")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storeit.db")
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

ALLOW_ORIGINS = [
    o.strip()
    for o in os.getenv("ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

# platform ids
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
BUCKET_ID = os.getenv("BUCKET_ID", "files")
USERS_COLLECTION_ID = os.getenv("USERS_COLLECTION_ID", "users")
FILES_COLLECTION_ID = os.getenv("FILES_COLLECTION_ID", "files")

JWT_SECRET = os.getenv("JWT_SECRET", "change_this")
JWT_ALGO = os.getenv("JWT_ALGO", "HS256")
SESSION_EXPIRES_DAYS = int(os.getenv("SESSION_EXPIRES_DAYS", "7"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "storeit-session")
OTP_EXPIRES_MINUTES = int(os.getenv("OTP_EXPIRES_MINUTES", "15"))

SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
SENDGRID_FROM_EMAIL = os.getenv("SENDGRID_FROM_EMAIL")
SENDGRID_FROM_NAME = os.getenv("SENDGRID_FROM_NAME", "StoreIt")

AVATAR_PLACEHOLDER_URL = os.getenv(
    "AVATAR_PLACEHOLDER_URL",
    "https://img.freepik.com/free-psd/3d-illustration-person-with-sunglasses_23-2149436188.jpg",
)

TOTAL_STORAGE_BYTES = 2 * 1024 * 1024 * 1024  # 2GB per user
SIGN_IN_PATH = "/sign-in"
REVALIDATION_MAX_PATHS = int(os.getenv("REVALIDATION_MAX_PATHS", "1000"))
