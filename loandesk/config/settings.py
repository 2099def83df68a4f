# loandesk/config/settings.py
# Environment-driven configuration for the API

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings read from the environment (.env supported)"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./loandesk.db")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "")
    # Seconds a SQLite connection waits for another writer to finish
    SQLITE_BUSY_TIMEOUT: float = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))

    # Auth tokens
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 12))
    PASSWORD_HASH_ITERATIONS: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", 260000))

    # HTTP
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if origin.strip()
    ]
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    RELOAD: bool = os.getenv("RELOAD", "true").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE_URL.lower().startswith("sqlite")

    @classmethod
    def engine_connect_args(cls) -> dict:
        """Driver arguments for create_engine based on the configured backend"""
        if cls.is_sqlite():
            return {"check_same_thread": False, "timeout": cls.SQLITE_BUSY_TIMEOUT}
        if cls.DB_SSLMODE:
            # Managed PostgreSQL (Render, Railway) needs sslmode=require
            return {"sslmode": cls.DB_SSLMODE}
        return {}


settings = Settings()
