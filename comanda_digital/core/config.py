from decimal import Decimal
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Configurações básicas do projeto
    PROJECT_NAME: str = "API Comanda Digital"
    PROJECT_VERSION: str = "1.0.0"
    API_STR: str = "/api"
    ENVIRONMENT: str = "development"
    SUPPORT_EMAIL: str = "support@example.com"
    LOG_LEVEL: str = "INFO"

    # Configurações de segurança
    SECRET_KEY: str = Field(...)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 12 * 60

    # Segredos das rotinas de limpeza (cron e chamadas administrativas)
    CLEANUP_API_KEY: str = ""
    CRON_SECRET: str = ""

    # Configurações de banco de dados
    DATABASE_URL: str = Field(...)

    # URL pública usada nos QR Codes das mesas
    APP_BASE_URL: str = "http://localhost:3000"

    # Redis (publicação de eventos em tempo real)
    REDIS_ENABLED: bool = True
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # Regras de negócio
    VAT_RATE: Decimal = Decimal("0.14")
    CART_MAX_AGE_HOURS: int = 24
    PIN_MIN: int = 1000
    PIN_MAX: int = 9999
    STALE_USER_THRESHOLD_MINUTES: int = 120
    AUTO_CLEANUP_ENABLED: bool = False
    AUTO_CLEANUP_INTERVAL_MINUTES: int = 5
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_MAX_DELAY_SECONDS: float = 5.0

    # Configurações de CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignora variáveis extras não declaradas


settings = Settings()
