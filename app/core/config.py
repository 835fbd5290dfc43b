from pydantic_settings import BaseSettings
from functools import lru_cache
from decimal import Decimal
import json


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = '["http://localhost:1420", "http://localhost:5173"]'
    ISSUER_NAME: str = "Cheque Approval"
    CURRENCY_NAME: str = "Dollar"
    CURRENCY_SUBUNIT_NAME: str = "Cent"
    MAX_CHEQUE_AMOUNT: Decimal = Decimal("25000000.00")

    @property
    def cors_origins_list(self) -> list[str]:
        return json.loads(self.CORS_ORIGINS)

    @property
    def debug(self) -> bool:
        return self.ENVIRONMENT == "development"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
