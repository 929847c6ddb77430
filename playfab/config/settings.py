from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Basic Info ---
    APP_NAME: str = "PlayFab Server Client"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # --- Credentials ---
    # Все три поля обязательны для клиента, но здесь допускаем пустые значения:
    # проверку делает конструктор PlayFab (ConfigurationError).
    PLAYFAB_SECRET_KEY: str = ""
    PLAYFAB_TITLE_ID: str = ""
    PLAYFAB_CATALOG_VERSION: str = ""

    # Шаблон: {title_id}.playfabapi.com/{api}/{function}
    PLAYFAB_BASE_URL: str = "https://{title_id}.playfabapi.com/{api}/{function}"

    # --- HTTP Pool Configuration ---
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_CONNECTIONS_PER_HOST: int = 100
    HTTP_KEEPALIVE_EXPIRY: float = 60.0
    HTTP_TIMEOUT: float = 10.0

    # --- Retry Policy Configuration ---
    # Фиксированная задержка, без джиттера.
    RETRY_BUDGET: int = 3
    RETRY_WAIT: float = 1.0

    # 400 оставлен ради совместимости с прежним поведением (см. DESIGN.md).
    RETRY_HTTP_CODES: List[int] = [400, 502, 503]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
