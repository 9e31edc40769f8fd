# interior_ledger/core/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )
    
    # App Configuration
    APP_NAME: str = "Interior Ledger API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"
    
    # Database Configuration
    DATABASE_URL: str
    
    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080
    
    # CORS Configuration
    FRONTEND_URL: str
    
    # Ledger Configuration
    CURRENCY: str = "INR"
    RECENT_TRANSACTIONS_LIMIT: int = 10
    
    # Optional: Environment
    ENVIRONMENT: str = "development"
    
    @property
    def is_sqlite(self) -> bool:
        """SQLite engines (tests, local runs) reject the connection pool options"""
        return self.DATABASE_URL.startswith("sqlite")

# Create a global settings instance
settings = Settings()
