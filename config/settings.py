# config/settings.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Database configuration
DB_URL = os.getenv("DB_URL", "sqlite:///./vhiem.db")

# Identity provider token verification
# AUTH_JWT_KEY is the provider's PEM public key (RS256) or a shared secret (HS256)
AUTH_JWT_KEY = os.getenv("AUTH_JWT_KEY") or os.getenv("JWT_SECRET") or "dev-secret-vhiem-key"
AUTH_JWT_ALGORITHMS = [a.strip() for a in os.getenv("AUTH_JWT_ALGORITHMS", "HS256").split(",") if a.strip()]
AUTH_JWT_ISSUER = os.getenv("AUTH_JWT_ISSUER") or None
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE") or None

# Application environment
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
).split(",") if o.strip()]

# Media storage
STORAGE_TYPE = os.getenv("STORAGE_TYPE", "local")  # "local" or "s3"
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")
UPLOAD_URL_TTL_SEC = int(os.getenv("UPLOAD_URL_TTL_SEC", 600))
S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "vhiem-media")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL") or None  # For MinIO
S3_PUBLIC_BASE_URL = os.getenv("S3_PUBLIC_BASE_URL") or None
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
# HMAC secret for local upload URLs (kept separate from the provider's verification key)
MEDIA_SIGNING_KEY = os.getenv("MEDIA_SIGNING_KEY") or os.getenv("SECRET_KEY") or "dev-media-signing-key"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 10 * 1024 * 1024))

# Dev only: create tables on startup instead of running Alembic
VHIEM_DEV_CREATE_SCHEMA = os.getenv("VHIEM_DEV_CREATE_SCHEMA") == "1"
