# projecthub/config.py
import os
from dataclasses import dataclass
from functools import lru_cache

MIN_JWT_SECRET_BYTES = 32


class ConfigurationError(RuntimeError):
    """서버를 시작할 수 없는 설정일 때"""
    pass


@dataclass(frozen=True)
class Settings:
    """환경 변수로부터 읽어 들인 애플리케이션 설정."""

    database_url: str
    jwt_secret: str
    jwt_algorithm: str
    access_token_minutes: int
    host: str
    port: int
    log_level: str
    admin_username: str
    admin_password: str
    project_delete_requires_owner: bool


def _int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@lru_cache
def get_settings() -> Settings:
    """현재 환경 변수를 읽어 Settings 인스턴스를 만듭니다. (캐시됨)"""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///projecthub.db"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        access_token_minutes=_int(os.getenv("ACCESS_TOKEN_MINUTES"), 60),
        host=os.getenv("HOST", ""),
        port=_int(os.getenv("PORT"), 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        admin_username=os.getenv("ADMIN_USERNAME", ""),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        project_delete_requires_owner=_bool(os.getenv("PROJECT_DELETE_REQUIRES_OWNER"), False),
    )


def ensure_secure(settings: Settings):
    """
    서버 시작 전에 토큰 서명 키를 검사합니다.

    Raises:
        ConfigurationError: JWT_SECRET이 없거나 32바이트보다 짧을 때.
    """
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not set; refusing to start.")
    if len(settings.jwt_secret.encode("utf-8")) < MIN_JWT_SECRET_BYTES:
        raise ConfigurationError(
            f"JWT_SECRET must be at least {MIN_JWT_SECRET_BYTES} bytes; refusing to start."
        )
