import os
from dotenv import load_dotenv

load_dotenv()   # Loads .env into environment variables


def _flag(name, default):
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    # JSON database
    DB_PATH = os.getenv("DB_PATH", os.path.join("data", "db.json"))
    DB_CREATE_IF_MISSING = _flag("DB_CREATE_IF_MISSING", True)

    # "uuid" or "counter"; per-collection overrides below
    ID_POLICY = os.getenv("ID_POLICY", "uuid")
    ID_POLICIES = {
        name: os.getenv(f"ID_POLICY_{name.upper()}")
        for name in ("usuarios", "lecturas", "reportes", "rfid")
        if os.getenv(f"ID_POLICY_{name.upper()}")
    }

    # Photo uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    TOKEN_EXPIRE_HOURS = int(os.getenv("TOKEN_EXPIRE_HOURS", 8))
    RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", 30))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
