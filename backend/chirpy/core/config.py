# chirpy/core/config.py
import os

from dotenv import load_dotenv


def str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


class Settings:
    def __init__(self) -> None:
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            # Load .env only for non-prod so prod can't be accidentally influenced by local files.
            load_dotenv()

        # ----------------------------
        # Database
        # ----------------------------
        self.DB_URL = os.getenv("DB_URL", "").strip()

        # "dev" unlocks POST /admin/reset
        self.PLATFORM = os.getenv("PLATFORM", "").strip().lower()

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # Auth / JWT
        # ----------------------------
        self.JWT_SECRET = os.getenv("JWT_SECRET", "")

        # Polka (payments provider) webhook key, sent as "Authorization: ApiKey <key>"
        self.POLKA_KEY = os.getenv("POLKA_KEY", "")

        # ----------------------------
        # Static files / rate limiting / logging
        # ----------------------------
        self.FILESERVER_ROOT = os.getenv("FILESERVER_ROOT", ".")
        self.ENABLE_RATE_LIMITING = str_to_bool(os.getenv("ENABLE_RATE_LIMITING", "false"))
        self.LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute").strip() or "10/minute"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

        # Final: fail fast in prod
        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.JWT_SECRET:
            missing.append("JWT_SECRET")
        if not self.DB_URL:
            missing.append("DB_URL")
        if not self.POLKA_KEY:
            missing.append("POLKA_KEY")

        if self.PLATFORM == "dev":
            raise RuntimeError("PLATFORM=dev is not allowed in prod")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"

    @property
    def is_dev_platform(self) -> bool:
        return self.PLATFORM == "dev"

    @property
    def database_url(self) -> str:
        return self.DB_URL or "sqlite:///./chirpy.db"


settings = Settings()


def require_jwt_secret() -> None:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set")
