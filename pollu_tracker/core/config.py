from pydantic import BaseModel
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    storage_path: str | None = None
    storage_key: str = "polluTracker.pollutions"
    seed_on_empty: bool = True
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_base_url: str = "http://localhost:3000/api"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        origins = os.getenv("CORS_ORIGINS", "*")
        _settings = Settings(
            storage_path=os.getenv("POLLUTIONS_STORAGE_PATH") or None,
            storage_key=os.getenv("POLLUTIONS_STORAGE_KEY", "polluTracker.pollutions"),
            seed_on_empty=_env_bool("POLLUTIONS_SEED", True),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "3000")),
            api_base_url=os.getenv("API_BASE_URL", "http://localhost:3000/api"),
        )
    return _settings
