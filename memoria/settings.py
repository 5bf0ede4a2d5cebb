from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # Shared gallery password. An empty value disables login entirely.
    # TODO: drop the literal default once every deployment sets MEMORIA_PASSWORD.
    memoria_password: str = "lucasnatalia"

    storage_bucket: str = "memorias"
    storage_region: str = "us-east-1"
    storage_endpoint_url: Optional[str] = None
    storage_public_url: Optional[str] = None
    storage_access_key_id: str = ""
    storage_secret_access_key: str = ""
    storage_ensure_bucket: bool = True
    storage_cache_control: str = "max-age=3600"
    list_limit: int = 1000

    session_cookie_name: str = "memoria_auth"
    session_cookie_max_age: int = 10 * 365 * 24 * 3600

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    app_title: str = "Memoria"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

def get_settings() -> Settings:
    """Dependency provider for Settings"""
    return settings
