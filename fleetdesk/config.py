from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ─── Application ───────────────────────────────────────────────────────────
    APP_NAME: str = "FleetDesk"
    APP_ENV:  str = "development"
    APP_DEBUG: bool = True
    APP_HOST:  str = "0.0.0.0"
    APP_PORT:  int = 8000
    LOG_LEVEL: str = "INFO"

    # ─── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL:          str
    DATABASE_POOL_SIZE:    int  = 10
    DATABASE_MAX_OVERFLOW: int  = 20
    DATABASE_POOL_TIMEOUT: int  = 30
    DATABASE_ECHO:         bool = False

    # ─── Documents ─────────────────────────────────────────────────────────────
    # Gatepass, waqala and vehicle registrations within this window are "expiring"
    DOCUMENT_EXPIRY_WARNING_DAYS: int = 30

    # ─── CORS ──────────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8080"

    def get_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


settings = Settings()
