import os
from pathlib import Path
from dotenv import load_dotenv
from fastapi.security import HTTPBearer

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")


class Settings:
    PROJECT_NAME = "Healthify Water Service"

    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'healthify.db'}")

    JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))

    DEFAULT_WATER_GOAL = int(os.getenv("DEFAULT_WATER_GOAL", 8))
    WATER_GOAL_MIN = int(os.getenv("WATER_GOAL_MIN", 1))
    WATER_GOAL_MAX = int(os.getenv("WATER_GOAL_MAX", 20))
    WATER_COUNT_MAX = int(os.getenv("WATER_COUNT_MAX", 1000))
    WATER_HISTORY_DEFAULT_DAYS = int(os.getenv("WATER_HISTORY_DEFAULT_DAYS", 30))
    WATER_HISTORY_MAX_DAYS = int(os.getenv("WATER_HISTORY_MAX_DAYS", 366))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    SEED_DEFAULT_USER = os.getenv("SEED_DEFAULT_USER", "true").lower() == "true"
    DEFAULT_USER_EMAIL = os.getenv("DEFAULT_USER_EMAIL", "demo@healthify.app")
    DEFAULT_USER_NAME = os.getenv("DEFAULT_USER_NAME", "Demo User")

    bearer_scheme = HTTPBearer(auto_error=False)
    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


settings = Settings()
