from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class GlobalConfig(BaseSettings):
    # Platform Info
    PLATFORM_NAME: str = "Afflient"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Service
    CONTENT_ANALYSIS_PORT: int = 8010
    CORS_ORIGINS: str = "*"  # comma separated

    # Keyword extraction
    MAX_KEYWORDS: int = 20
    MIN_KEYWORD_LENGTH: int = 4

    # Buying intent
    INTENT_SCORE_DIVISOR: float = 100.0
    HIGH_INTENT_THRESHOLD: float = 0.6

    # Recommendations
    MAX_RECOMMENDATIONS: int = 5
    CATALOG_FETCH_LIMIT: int = 20
    KEYWORD_MATCH_WEIGHT: float = 2.0
    CATEGORY_MATCH_WEIGHT: float = 5.0
    COMMISSION_WEIGHT: float = 0.1

    # Collaborators ("file" for local JSON stores, "http" for the data API)
    COLLABORATOR_BACKEND: str = "file"
    COLLABORATOR_TIMEOUT_SECONDS: float = 5.0
    DATA_DIR: str = "data"

    WEBSITE_REGISTRY_URL: str = "http://localhost:8011"
    PRODUCT_CATALOG_URL: str = "http://localhost:8012"
    RECORD_STORE_URL: str = "http://localhost:8013"
    COLLABORATOR_API_KEY: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

# Singleton instance
settings = GlobalConfig()
