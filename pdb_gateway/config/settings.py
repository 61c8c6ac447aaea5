from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from pdb_gateway.models.server import PdbConfig


class Settings(BaseSettings):
    # --- Logging ---
    # True -> DEBUG-уровень в main.py (как --verbose)
    DEBUG: bool = False

    # --- PuppetDB Servers ---
    # Через запятую, порядок = порядок failover
    SERVER_URLS: str = "https://puppetdb:8081"
    SERVER_URL_TIMEOUT: float = 30.0
    SOFT_WRITE_FAILURE: bool = False

    # --- HTTP Client Configuration ---
    # None -> системное хранилище сертификатов
    SSL_CA_FILE: Optional[Path] = None
    SSL_CERT_FILE: Optional[Path] = None
    SSL_KEY_FILE: Optional[Path] = None
    USER_AGENT: str = "pdb-gateway/0.1.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def get_server_url_list(self) -> List[str]:
        if not self.SERVER_URLS:
            return []
        return [u.strip() for u in self.SERVER_URLS.split(",") if u.strip()]

    def to_config(self) -> PdbConfig:
        """Неизменяемый PdbConfig для Executor (валидация server_urls здесь)."""
        return PdbConfig.from_values(
            self.get_server_url_list,
            server_url_timeout=self.SERVER_URL_TIMEOUT,
            soft_write_failure=self.SOFT_WRITE_FAILURE,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
