"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "menubot.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass
class Settings:
    """Runtime settings read from the environment."""

    session_ttl_minutes: int = 20
    search_limit: int = 8
    currency: str = "QAR"
    default_locale: str = "en"
    whatsapp_token: str | None = None
    whatsapp_verify_token: str | None = None
    whatsapp_app_secret: str | None = None
    whatsapp_phone_number_id: str | None = None
    whatsapp_api_version: str = "v22.0"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call after load_dotenv)."""
        return cls(
            session_ttl_minutes=int(os.getenv("SESSION_TTL_MINUTES", "20")),
            search_limit=int(os.getenv("SEARCH_LIMIT", "8")),
            currency=os.getenv("CURRENCY", "QAR"),
            default_locale=os.getenv("DEFAULT_LOCALE", "en"),
            whatsapp_token=os.getenv("WHATSAPP_TOKEN"),
            whatsapp_verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN"),
            whatsapp_app_secret=os.getenv("WHATSAPP_APP_SECRET"),
            whatsapp_phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID"),
            whatsapp_api_version=os.getenv("WHATSAPP_API_VERSION", "v22.0"),
        )
