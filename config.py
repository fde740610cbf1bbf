# config.py
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional
from dotenv import load_dotenv
import os

load_dotenv()


def _env(*names: str, default: str = "") -> str:
    """Return the first non-blank value among the given env vars"""
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return default


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str) -> Optional[int]:
    raw = _env(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_key: str = ""
    jwt_secret: str = ""

    # GoHighLevel
    webhook_secret: str = ""
    webhook_secret_header: str = "x-agm-secret"
    notify_url: str = ""
    notify_timeout_secs: float = 5.0

    app_url: str = ""
    invite_ttl_days: Optional[int] = None
    avatar_bucket: str = "avatars"
    log_level: str = "INFO"

    cors_origins: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Settings":
        app_url = _env("APP_URL", "FRONTEND_URL").rstrip("/")
        return cls(
            supabase_url=_env("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
            supabase_key=_env("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_KEY"),
            jwt_secret=_env("SUPABASE_JWT_SECRET"),
            webhook_secret=_env("GHL_WEBHOOK_SECRET"),
            webhook_secret_header=_env("GHL_WEBHOOK_SECRET_HEADER", default="x-agm-secret"),
            notify_url=_env("GHL_INBOUND_WEBHOOK_URL"),
            notify_timeout_secs=_env_float("GHL_NOTIFY_TIMEOUT_SECS", 5.0),
            app_url=app_url,
            invite_ttl_days=_env_int("INVITE_TTL_DAYS"),
            avatar_bucket=_env("AVATAR_BUCKET", default="avatars"),
            log_level=_env("LOG_LEVEL", default="INFO").upper(),
            cors_origins=[o for o in ["http://localhost:3000", app_url] if o],
        )

    def missing(self) -> List[str]:
        """Names of required settings that are not configured"""
        required = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_key,
            "SUPABASE_JWT_SECRET": self.jwt_secret,
            "GHL_WEBHOOK_SECRET": self.webhook_secret,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> "Settings":
        missing = self.missing()
        if missing:
            raise RuntimeError(f"Server misconfigured: {', '.join(missing)} missing")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
