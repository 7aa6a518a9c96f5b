from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "Finanzas API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Payment reconciliation and ledger engine for ARS/USD back-office accounting"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "finanzas"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT
    SECRET_KEY: str = "change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Chart of accounts
    OPERATOR_COST_ACCOUNT_CODE: str = "4.2.01"
    CUSTOMER_INCOME_ACCOUNT_CODE: str = "4.1.01"

    # Bookkeeping defaults
    DEFAULT_PAYMENT_METHOD: str = "BANK_TRANSFER"
    DEFAULT_LEDGER_METHOD: str = "BANK"
    BALANCE_TOLERANCE: Decimal = Decimal("1")
    INCLUDE_PENDING_DEBTS_AS_LIABILITIES: bool = True

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
