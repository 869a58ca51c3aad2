from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "Shop Ledger API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Customer debt and employee compensation ledger"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Ledger store backend
    LEDGER_STORE: Literal["mongo", "memory"] = "mongo"

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "shopledger"
    # Multi-document transactions need a replica set
    MONGODB_TRANSACTIONS: bool = True

    # Ledger policies
    # absorb: leftover of a customer payment is kept silently
    # reject: a payment larger than the outstanding balance is refused
    OVERPAYMENT_POLICY: Literal["absorb", "reject"] = "absorb"
    # allow: settlement may exceed the balance and flip its sign
    # clamp: settlement amount is reduced to abs(balance)
    # reject: settlement larger than abs(balance) is refused
    SETTLEMENT_POLICY: Literal["allow", "clamp", "reject"] = "allow"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
