from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "booking-api"
    MODE: str = "dev"  # dev | staging | prod

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "http://localhost:3000"

    DATABASE_URL: str
    DB_AUTO_CREATE: bool = True
    DB_ECHO: bool = False

    # Query compiler
    QUERY_DEFAULT_LIMIT: int = 100

    # Seating layout caps
    MAX_LINES: int = 20
    MAX_ROWS: int = 200
    MAX_NAME_LENGTH: int = 255

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
