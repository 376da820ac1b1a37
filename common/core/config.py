from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import Environment, CacheProviderType


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # API Settings
    app_name: str = "Try-on Studio API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Database Components
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "tryon"
    db_use_nullpool: bool = False
    db_pool_size: int = 10
    db_pool_overflow: int = 5

    @property
    def database_url(self) -> str:
        """Construct database URL from components."""
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    @property
    def redis_connection_url(self) -> str:
        """Construct Redis URL from components."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        else:
            return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Caching
    cache_provider: CacheProviderType = CacheProviderType.REDIS

    # Auth (tokens are issued by the account service, we only verify them)
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    auth_cookie_name: str = "token"

    # Payments
    payment_mock_enabled: Optional[bool] = None  # Defaults to non-production
    default_currency: str = "CNY"

    # Gateway notification keys (PEM, or bare base64 as the Alipay console shows it)
    alipay_public_key: Optional[str] = None
    wechat_platform_public_key: Optional[str] = None
    wechat_api_v3_key: Optional[str] = None  # 32-byte AES-256-GCM key

    @property
    def mock_payments_enabled(self) -> bool:
        """Mock gateway is available everywhere except production unless forced."""
        if self.payment_mock_enabled is not None:
            return self.payment_mock_enabled
        return self.environment != Environment.PRODUCTION

    # OpenTelemetry
    otel_service_name: str = "tryon-api"
    otel_service_version: str = "1.0.0"
    otel_exporter_otlp_endpoint: Optional[str] = None
    otel_exporter_otlp_headers: Optional[str] = None  # "key=value,key2=value2"
    otel_console_logs: bool = True  # Used only without an OTLP endpoint

    @property
    def cors_allowed_origins(self) -> List[str]:
        """Auto-select CORS origins based on environment."""
        if self.environment == Environment.LOCAL:
            return [
                "http://localhost:3000",
                "http://localhost:3001",
            ]
        return [
            "https://tryon.studio",
            "https://www.tryon.studio",
        ]


settings = Settings()
