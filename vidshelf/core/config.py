from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from enum import Enum

class BaseConfig(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name":True
    }

class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

class CompressionType(str, Enum):
    GZIP = "gz"
    BZIP2 = "bz2"
    ZIP = "zip"

class AppSettings(BaseSettings):
    app_name: str = Field(
        default="vidshelf",
        min_length=1,
        max_length=100,
        alias="APP_NAME"
    )
    app_port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        alias="APP_PORT"
    )

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_reload: bool = Field(default=False, alias="APP_RELOAD")
    app_log_level: LogLevel = Field(default=LogLevel.INFO, alias="APP_LOG_LEVEL")
    log_format: str = Field(default="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}", alias="LOG_FORMAT")
    log_file: str = Field(default="logs/app.log", alias="LOG_FILE")
    log_rotation: str = Field(default="1 day", alias="LOG_ROTATION")
    log_compression: CompressionType = Field(default=CompressionType.GZIP, alias="LOG_COMPRESSION")
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")
    create_tables: bool = Field(default=True, alias="CREATE_TABLES")

    model_config = BaseConfig.model_config

class DatabaseSettings(BaseSettings):
    postgres_user: str = Field(default="postgres", min_length=1, alias="POSTGRES_USER")
    postgres_password: str = Field(default="postgres", min_length=1, alias="POSTGRES_PASSWORD")
    postgres_db: str = Field(default="vidshelf", min_length=1, alias="POSTGRES_DB")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, ge=1, le=65535, alias="POSTGRES_PORT")
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")
    debug_sql: bool = Field(default=False, alias="DEBUG_SQL")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    model_config = BaseConfig.model_config


class StorageSettings(BaseSettings):
    bucket_name: str = Field(default="alphie3000.appspot.com", min_length=1, alias="STORAGE_BUCKET")
    storage_host: str = Field(default="storage.googleapis.com", min_length=1, alias="STORAGE_HOST")
    access_key_id: Optional[str] = Field(default=None, alias="STORAGE_ACCESS_KEY_ID")
    secret_access_key: Optional[str] = Field(default=None, alias="STORAGE_SECRET_ACCESS_KEY")
    region: str = Field(default="auto", alias="STORAGE_REGION")
    connect_timeout: float = Field(default=10.0, gt=0, alias="STORAGE_CONNECT_TIMEOUT")
    read_timeout: float = Field(default=120.0, gt=0, alias="STORAGE_READ_TIMEOUT")
    key_prefix: str = Field(default="videos", min_length=1, alias="STORAGE_KEY_PREFIX")

    @property
    def endpoint_url(self) -> str:
        return f"https://{self.storage_host}"

    def public_url(self, key: str) -> str:
        return f"https://{self.storage_host}/{self.bucket_name}/{key}"

    model_config = BaseConfig.model_config


class UploadSettings(BaseSettings):
    max_upload_bytes: int = Field(default=100 * 1024 * 1024, gt=0, alias="MAX_UPLOAD_BYTES")
    # multipart boundaries and the text fields ride on top of the file part
    form_overhead_bytes: int = Field(default=1024 * 1024, ge=0, alias="FORM_OVERHEAD_BYTES")

    model_config = BaseConfig.model_config
