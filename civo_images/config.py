from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "civo-disk-images"
    app_version: str = "0.1.0"
    env: str = "development"
    debug: bool = False

    # Civo API connection settings (used by HttpTransport)
    civo_api_key: SecretStr = SecretStr("")
    civo_api_url: str = "https://api.civo.com"
    civo_request_timeout_s: float = Field(default=30.0, gt=0)


settings = Settings()
