"""
Application settings using Pydantic Settings.

Environment variables are loaded from .env file.
"""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Sync configuration loaded from environment variables.

    Create a .env file in the project root to override any of these values.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ========================================================================
    # Database
    # ========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017/lupa_cidada"
    MONGODB_DATABASE: str = "lupa_cidada"
    MONGODB_CONNECT_TIMEOUT_MS: int = 10_000
    MONGODB_MAX_POOL_SIZE: int = 100
    MONGODB_MIN_POOL_SIZE: int = 10

    # ========================================================================
    # External APIs
    # ========================================================================

    # Câmara dos Deputados (https://dadosabertos.camara.leg.br/swagger/api.html)
    CAMARA_BASE_URL: str = "https://dadosabertos.camara.leg.br/api/v2"
    CAMARA_REQUESTS_PER_SECOND: float = 5.0
    CAMARA_LEGISLATURE: int = 57

    # Senado Federal (https://www12.senado.leg.br/dados-abertos)
    SENADO_BASE_URL: str = "https://legis.senado.leg.br/dadosabertos"
    SENADO_REQUESTS_PER_SECOND: float = 3.0  # Senado is slower

    # Curated roster of executive office holders (president, governors).
    # None means the roster shipped with the package.
    EXECUTIVES_FILE: Optional[Path] = None

    # ========================================================================
    # HTTP / pagination
    # ========================================================================
    HTTP_TIMEOUT: float = 30.0
    USER_AGENT: str = "LupaCidada/1.0 (Portal de Transparencia)"

    # Optional detail fetches (tramitations, themes) are dropped after this
    ENRICHMENT_TIMEOUT: float = 3.0

    # Page ceiling used when a listing does not expose a "last" link
    ADAPTIVE_MAX_PAGES: int = 200
    ADAPTIVE_PAGE_RETRIES: int = 1

    # ========================================================================
    # Worker pools (per stage)
    # ========================================================================
    PAGE_WORKERS: int = 20
    DEPUTY_WORKERS: int = 5
    SENATOR_WORKERS: int = 3
    EXPENSE_WORKERS: int = 5
    VOTE_WORKERS: int = 10
    PROPOSITION_WORKERS: int = 8
    ATTENDANCE_WORKERS: int = 10
    PROGRESS_EVERY: int = 50

    # Overall deadline for a full sync run
    SYNC_DEADLINE_SECONDS: float = 30 * 60

    # ========================================================================
    # Logging
    # ========================================================================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ========================================================================
    # Application
    # ========================================================================
    APP_NAME: str = "Lupa Cidadã Sync"
    APP_VERSION: str = "0.1.0"


# Singleton instance
settings = Settings()
