"""Application-wide configuration settings."""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv(override=True)

# Base paths
BASE_DIR = Path(__file__).parent
LOGS_DIR = BASE_DIR / "logs"


class PROVIDER_TYPE(Enum):
    GOOGLE = "google"
    GROQ = "groq"


class APISettings(BaseSettings):
    """API-related settings."""

    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class DatabaseSettings(BaseSettings):
    """Database-related settings."""

    mongodb_uri: str = Field(default="mongodb://localhost:27017", validation_alias="MONGODB_URI")
    database_name: str = Field(default="casebuddy", validation_alias="DATABASE_NAME")

    @property
    def uri(self) -> str:
        """Get the MongoDB connection URI."""
        return self.mongodb_uri

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class AISettings(BaseSettings):
    """AI-related settings."""

    google_api_key: SecretStr = Field(default=SecretStr(""), validation_alias="GOOGLE_API_KEY")
    groq_api_key: SecretStr = Field(default=SecretStr(""), validation_alias="GROQ_API_KEY")
    default_provider: PROVIDER_TYPE = Field(default=PROVIDER_TYPE.GOOGLE, validation_alias="AI_DEFAULT_PROVIDER")
    default_model: str = Field(default="gemini-2.5-flash", validation_alias="AI_DEFAULT_MODEL")
    embedding_model: str = Field(default="models/text-embedding-004", validation_alias="AI_EMBEDDING_MODEL")
    embedding_dimensions: int = Field(default=768)

    # Feedback generation
    feedback_temperature: float = Field(default=0.7)
    feedback_max_tokens: int = Field(default=2048)

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class CacheSettings(BaseSettings):
    """Redis cache settings."""

    redis_url: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")
    key_prefix: str = Field(default="casebuddy")

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class QuotaSettings(BaseSettings):
    """AI feedback quota settings."""

    daily_limit: int = Field(default=3, validation_alias="FEEDBACK_DAILY_LIMIT")
    admin_emails: List[str] = Field(default_factory=list, validation_alias="ADMIN_EMAILS")
    min_answer_length: int = Field(default=50)
    privileged_remaining: int = Field(default=999)

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class SimilaritySettings(BaseSettings):
    """Similar-case search and indexing settings."""

    cache_ttl_seconds: int = Field(default=24 * 60 * 60)
    stale_retention_seconds: int = Field(default=7 * 24 * 60 * 60)
    default_top_k: int = Field(default=5)
    vector_index_name: str = Field(default="case_embeddings_index", validation_alias="VECTOR_INDEX_NAME")
    index_delay_seconds: float = Field(default=0.3)
    description_snippet_length: int = Field(default=500)

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class LoggingSettings(BaseSettings):
    """Logging-related settings."""

    log_level: str = Field(default="INFO")
    file_log_level: str = Field(default="DEBUG")
    backup_count: int = Field(default=9)
    format: str = Field(default="%(name)s - %(levelname)s - %(message)s")
    file_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    enable_endpoint_logging: bool = Field(default=False, validation_alias="ENABLE_ENDPOINT_LOGGING")
    noisy_loggers: Dict[str, str] = Field(
        default={
            "urllib3": "WARNING",
            "uvicorn": "WARNING",
            "pymongo": "WARNING",
            "pymongo.topology": "WARNING",
            "pymongo.server": "WARNING",
            "pymongo.connection": "WARNING",
            "pymongo.command": "WARNING",
            "httpx": "WARNING",
            "grpc": "WARNING",
            "watchfiles": "WARNING",
        }
    )

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class Settings(BaseSettings):
    """Global settings container."""

    api: APISettings = Field(default_factory=APISettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    ai: AISettings = Field(default_factory=AISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    quota: QuotaSettings = Field(default_factory=QuotaSettings)
    similarity: SimilaritySettings = Field(default_factory=SimilaritySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    AUTH_SECRET_KEY: str = Field(default="", validation_alias="AUTH_SECRET_KEY")
    auth_token_lifetime: Optional[int] = Field(default=3600)

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


# Create global settings instance
settings = Settings()
