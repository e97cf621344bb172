"""
Application settings.
Values are read from environment variables (or a local .env file).
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the catalog API"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Sheet Catalog API"
    app_version: str = "1.0.0"
    ENVIRONMENT: str = "development"
    debug: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS
    CORS_ORIGINS: str = "*"
    cors_allow_credentials: bool = False

    # Backing workbook (empty path -> in-memory workbook)
    WORKBOOK_PATH: str = ""
    WORKBOOK_AUTOSAVE: bool = True
    PRODUCT_SHEET: str = "Products"
    VARIANT_SHEET: str = "Variants"
    LOT_SHEET: str = "Lots"

    # Column defaults and status sentinels
    VARIANT_STATUS_DEFAULT: str = "dynamic"
    LOT_STATUS_DEFAULT: str = "in_stock"
    IN_STOCK_STATUS: str = "in_stock"

    # Lot key generation
    LOT_ID_PREFIX: str = "lot_"
    LOT_ID_SUFFIX_LENGTH: int = 8
    LOT_ID_MAX_ATTEMPTS: int = 3

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
