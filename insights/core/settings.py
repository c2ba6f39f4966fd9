from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(str, Enum):
    DEV = "dev"
    HML = "hml"
    PROD = "prod"


class Settings(BaseSettings):
    APP_ENV: Env = Env.DEV
    DEBUG: bool = False

    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"

    # datas e horários dos agendamentos estão na TZ da organização
    ORG_TIMEZONE: str = "UTC"

    # ciclo de vida do cliente
    INACTIVE_AFTER_DAYS: int = 90
    DUPLICATE_PHONE_MIN_DIGITS: int = 7

    # marcadores internos gravados pela agenda (bloqueios, walk-ins anônimos)
    INTERNAL_EMAIL_MARKER: str = "@internal."
    BLOCKED_CLIENT_NAMES: str = "blocked,blocked time"

    # crescimento reportado quando a janela anterior está zerada
    GROWTH_FROM_ZERO: float = 100.0

    DAILY_SERIES_MAX_DAYS: int = 31
    FORECAST_DAYS: int = 30
    BUSINESS_HOURS_START: int = 9
    BUSINESS_HOURS_END: int = 17
    QUIET_HOURS_LIMIT: int = 3

    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def blocked_client_names(self) -> frozenset[str]:
        return frozenset(
            n.strip().lower() for n in self.BLOCKED_CLIENT_NAMES.split(",") if n.strip()
        )


# cria instância global
settings = Settings()
