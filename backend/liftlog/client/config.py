from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class ClientSettings(BaseSettings):
    API_URL: str = "http://localhost:8000"
    # None disables the timeout entirely
    API_TIMEOUT: float | None = 30.0

    model_config = SettingsConfigDict(env_prefix="LIFTLOG_", env_file=".env", extra="ignore")

@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
