# File: vidshare/core/config.py

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "vidshare API"
    VERSION: str = "0.1.0"

    api_v1_prefix: str = "/api/v1"
    debug: bool = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS ("*" or a comma-separated list)
    backend_cors_origins: List[str] = Field(
        default=os.getenv("CORS_ORIGINS", "*"), validate_default=True
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./vidshare.db")
    seed_demo_user: bool = os.getenv("SEED_DEMO_USER", "false").lower() in ("1", "true", "yes")

    # Security / auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))  # 1 day
    algorithm: str = "HS256"
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", 12))

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []

    @field_validator("bcrypt_rounds")
    @classmethod
    def check_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt accepts log2 cost factors 4..31
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
