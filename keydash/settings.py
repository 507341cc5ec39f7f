import os
from typing import Optional, List
from enum import Enum

import yaml
from pydantic import BaseModel, field_validator


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warn = "warn"
    error = "error"
    critical = "critical"


class LogFormat(str, Enum):
    console = "console"
    json = "json"


class BackendType(str, Enum):
    in_memory = "in_memory"
    sql = "sql"


class KeyValueStoreType(str, Enum):
    in_memory = "in_memory"
    redis = "redis"


class ConnectionSettings(BaseModel):
    database_url: Optional[str] = None
    redis_url: Optional[str] = "redis://localhost:6379/0"


class WebSettings(BaseModel):
    session_cookie: str = "sid"
    session_max_age: int = 24 * 60 * 60
    session_same_site: str = "lax"
    session_https_only: bool = False
    cors_origins: List[str] = []


class DefaultAdminSettings(BaseModel):
    username: str = "admin"
    password: Optional[str] = None


class KeySettings(BaseModel):
    credit_cost: int = 1
    generation_attempts: int = 5

    @field_validator("credit_cost", "generation_attempts")
    @classmethod
    def positive_validation(cls, v):
        if v < 1:
            raise ValueError("Must be a positive integer")
        return v


class KeydashSettings(BaseModel):
    secret: str
    connections: ConnectionSettings = ConnectionSettings()
    web: WebSettings = WebSettings()
    backend: BackendType = BackendType.in_memory
    kvstore: KeyValueStoreType = KeyValueStoreType.in_memory
    log_level: LogLevel = LogLevel.info
    log_format: LogFormat = LogFormat.console
    default_admin: DefaultAdminSettings = DefaultAdminSettings()
    keys: KeySettings = KeySettings()
    password_iterations: int = 240_000

    @field_validator("secret")
    @classmethod
    def secret_validation(cls, v):
        if len(v) < 32:
            raise ValueError("Secret must be at least 32 bytes long")
        return v

    @field_validator("password_iterations")
    @classmethod
    def password_iterations_validation(cls, v):
        if v < 1000:
            raise ValueError("password_iterations must be >= 1000")
        return v


def load_settings(settings_file=None):
    settings_file = settings_file or os.environ.get("KEYDASH_SETTINGS", "settings.yml")
    with open(settings_file, "r") as f:
        config_dict = yaml.safe_load(f)
        return KeydashSettings.model_validate(config_dict)
