import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Override=True so changes in backend/.env take effect on process reload.
#
# Tests build their own Settings against a temporary SQLite file; set DISABLE_DOTENV=1
# so a developer's .env never leaks into them.
if os.getenv("DISABLE_DOTENV") != "1":
    load_dotenv(override=True)

# Use an absolute path so the default DB works regardless of current working directory.
_default_sqlite_path = (Path(__file__).resolve().parent.parent / "dev.db").as_posix()

DEFAULT_SECRET_KEY = "dev_secret_change_me"


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_bool(name: str, default: str = "1") -> bool:
    return _env(name, default).lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    secret_key: str = DEFAULT_SECRET_KEY
    database_url: str = f"sqlite:///{_default_sqlite_path}"

    # SMTP (Gmail App Password or any relay). Port 465 means implicit SSL.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""
    smtp_tls: bool = True

    # Public client base URL, used for links inside emails.
    frontend_url: str = "http://localhost:5173"
    frontend_origins: tuple[str, ...] = ()

    host: str = "0.0.0.0"
    port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def load_settings() -> Settings:
    """Read settings from the process environment (and .env, unless disabled)."""
    smtp_user = _env("SMTP_USER")
    return Settings(
        # NOTE: keep a default for local dev so the server can boot even if SECRET_KEY isn't set.
        secret_key=_env("SECRET_KEY", DEFAULT_SECRET_KEY),
        database_url=_env("DATABASE_URL") or f"sqlite:///{_default_sqlite_path}",
        smtp_host=_env("SMTP_HOST"),
        smtp_port=_env_int("SMTP_PORT", 587),
        smtp_user=smtp_user,
        smtp_pass=_env("SMTP_PASS"),
        smtp_from=_env("SMTP_FROM") or smtp_user,
        smtp_tls=_env_bool("SMTP_TLS", "1"),
        frontend_url=_env("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
        frontend_origins=tuple(
            origin.strip() for origin in _env("FRONTEND_ORIGINS").split(",") if origin.strip()
        ),
        host=_env("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        app_env=_env("APP_ENV", "development").lower(),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
