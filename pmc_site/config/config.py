import functools

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV = dict(env_file='.env', env_file_encoding='utf-8', extra='ignore')


class DatabaseSettings(BaseSettings):
    MONGODB_URI: str | None = Field(default=None)
    DB_NAME: str = Field(default="pmc_website")
    COLLECTION_NAME: str = Field(default="contacts")

    model_config = SettingsConfigDict(**_ENV)

    @property
    def is_configured(self) -> bool:
        return bool(self.MONGODB_URI)


class EmailSettings(BaseSettings):
    """
        Mail transport settings, EMAIL_SERVICE selects a well known SMTP host
        or "sendgrid", in which case EMAIL_PASSWORD holds the API key
    """
    EMAIL_SERVICE: str = Field(default="gmail")
    EMAIL_USER: str | None = Field(default=None)
    EMAIL_PASSWORD: str | None = Field(default=None)
    NOTIFICATION_EMAIL: str | None = Field(default=None)
    SMTP_SERVER: str | None = Field(default=None)
    SMTP_PORT: int | None = Field(default=None)

    model_config = SettingsConfigDict(**_ENV)

    @property
    def is_configured(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_PASSWORD)

    @property
    def recipient(self) -> str | None:
        return self.NOTIFICATION_EMAIL or self.EMAIL_USER


class Logging(BaseSettings):
    filename: str | None = Field(default=None, validation_alias="LOG_FILENAME")

    model_config = SettingsConfigDict(**_ENV)


class Settings(BaseSettings):
    DATABASE_SETTINGS: DatabaseSettings = Field(default_factory=DatabaseSettings)
    EMAIL_SETTINGS: EmailSettings = Field(default_factory=EmailSettings)
    LOGGING: Logging = Field(default_factory=Logging)
    DEVELOPMENT_SERVER_NAME: str = Field(default="localhost")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    SITE_ROOT: str = Field(default=".")
    CONTACT_PATH: str = Field(default="/contact")

    model_config = SettingsConfigDict(case_sensitive=True, **_ENV)


@functools.lru_cache
def config_instance():
    return Settings()
