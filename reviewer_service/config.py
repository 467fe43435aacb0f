"""
Environment-based configuration for the reviewer assignment service.

All values are read from REVIEWER_SERVICE_* environment variables (or a local
.env file) and consumed by reviewer_service.settings.

Example:
    REVIEWER_SERVICE_DB_ENGINE=postgresql
    REVIEWER_SERVICE_DB_HOST=db
    REVIEWER_SERVICE_DB_NAME=reviews
    REVIEWER_SERVICE_LOG_LEVEL=DEBUG
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent

DB_ENGINES = {
    'sqlite': 'django.db.backends.sqlite3',
    'postgresql': 'django.db.backends.postgresql',
}


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='REVIEWER_SERVICE_',
        env_file='.env',
        extra='ignore',
    )

    debug: bool = False
    secret_key: str = 'django-insecure-change-me'
    allowed_hosts: list[str] = Field(default_factory=lambda: ['*'])
    log_level: str = 'INFO'

    db_engine: str = 'sqlite'
    db_name: str = str(BASE_DIR / 'db.sqlite3')
    db_host: str = ''
    db_port: int | None = None
    db_user: str = ''
    db_password: str = ''

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Must be one of {valid_levels}')
        return v_upper

    @field_validator('db_engine')
    @classmethod
    def validate_db_engine(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in DB_ENGINES:
            raise ValueError(f'Unsupported database engine: {v}. Must be one of {set(DB_ENGINES)}')
        return v_lower

    @model_validator(mode='after')
    def check_postgres_host(self) -> 'ServiceSettings':
        if self.db_engine == 'postgresql' and not self.db_host:
            raise ValueError('REVIEWER_SERVICE_DB_HOST is required for PostgreSQL')
        return self

    def database(self) -> dict:
        """Django DATABASES['default'] entry"""
        config = {
            'ENGINE': DB_ENGINES[self.db_engine],
            'NAME': self.db_name,
        }
        if self.db_engine == 'postgresql':
            config.update({
                'HOST': self.db_host,
                'PORT': self.db_port or 5432,
                'USER': self.db_user,
                'PASSWORD': self.db_password,
            })
        return config


@lru_cache
def get_settings() -> ServiceSettings:
    return ServiceSettings()
