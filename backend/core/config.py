import os

from dotenv import load_dotenv


load_dotenv()


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(24 * 60)))

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), default=["http://localhost:4200"])

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and not JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
