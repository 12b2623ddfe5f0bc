from typing import Optional, Tuple
from pydantic import computed_field, ConfigDict
from pydantic_settings import BaseSettings


class ProjectSettings(BaseSettings):

    # === Object storage (Cloudflare R2, S3 compatible) ===
    R2_ACCOUNT_ID: Optional[str] = None
    R2_ENDPOINT_URL: Optional[str] = None
    R2_ACCESS_KEY_ID: str
    R2_SECRET_ACCESS_KEY: str
    R2_BUCKET_NAME: str
    R2_REGION: str = "auto"

    # === Inference (Groq, OpenAI compatible) ===
    GROQ_API_KEY: str
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    TRANSCRIPTION_MODEL: str = "whisper-large-v3"
    SUMMARY_MODEL: str = "llama-3.1-70b-versatile"
    SUMMARY_TEMPERATURE: float = 0.7
    TITLE_MODEL: str = "llama-3.1-8b-instant"
    TITLE_TEMPERATURE: float = 0.5

    # === Identity provider ===
    AUTH_PROVIDER_URL: str
    AUTH_JWT_PUBLIC_KEY: str
    AUTH_JWT_ALGORITHM: str = "RS256"
    AUTH_JWT_AUDIENCE: Optional[str] = "authenticated"

    # === Processing ===
    ENABLE_HEADER_EXTRACTION: bool = True

    # === Limits / timeouts ===
    MAX_CONTENT_LENGTH: int = 50 * 1024 * 1024  # 50MB
    DEFAULT_TIMEOUT: float = 60.0
    CONNECT_TIMEOUT: float = 10.0

    # === Language ===
    DEFAULT_LANGUAGE: str = 'en'
    SUPPORTED_LANGUAGES: Tuple[str, ...] = ('en', 'sl')

    # === Database ===
    DB_HOST: Optional[str]
    DB_USER: Optional[str]
    DB_PASS: Optional[str]
    DB_NAME: Optional[str]
    CREATE_DB: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    FASTAPI_RUN_PORT: int = 8000
    AUTO_MIGRATE: bool = True  # for alembic migration on startup
    API_VERSION: Optional[str] = "1.0"
    CORS_ALLOWED_ORIGINS: Optional[str] = None

    @computed_field
    @property
    def R2_ENDPOINT(self) -> Optional[str]:
        if self.R2_ENDPOINT_URL:
            return self.R2_ENDPOINT_URL
        if self.R2_ACCOUNT_ID:
            return f"https://{self.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"
        return None

    @computed_field
    @property
    def AUTH_JWT_ISSUER(self) -> str:
        return f"{self.AUTH_PROVIDER_URL.rstrip('/')}/auth/v1"

    @computed_field
    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}/{self.DB_NAME}"

    @computed_field
    @property
    def DATABASE_URL_SYNC(self) -> str:
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}/{self.DB_NAME}"


    model_config = ConfigDict(
            env_file=".env",
            env_file_encoding="utf-8",
            extra="ignore",  # ignore unknown fields instead of raising an error
            )


settings = ProjectSettings()
