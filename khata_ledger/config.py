"""Configuration management using Pydantic Settings"""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./khata.db"

    # Service
    service_name: str = "khata-ledger"
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000"]

    # Auth
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 12
    bcrypt_rounds: int = 12

    # Ledger policies
    identity_field: Literal["phoneNumber", "username"] = "phoneNumber"
    allow_negative_balance: bool = True
    transaction_read_policy: Literal["owner_only", "counterparty", "any_customer"] = "counterparty"


settings = Settings()


def get_settings() -> Settings:
    """Dependency hook so tests can swap configuration"""
    return settings
