import logging
import os
from typing import Optional

from pydantic import BaseModel, Field


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    min_withdrawal: int = Field(default=500, ge=1)
    lock_timeout_seconds: float = Field(default=2.0, gt=0)
    admin_identities: list[str] = Field(default_factory=list)
    seed_catalog: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            min_withdrawal=int(os.getenv("ADLEDGER_MIN_WITHDRAWAL", "500")),
            lock_timeout_seconds=float(os.getenv("ADLEDGER_LOCK_TIMEOUT_SECONDS", "2.0")),
            admin_identities=_env_list("ADLEDGER_ADMIN_IDENTITIES"),
            seed_catalog=_env_bool("ADLEDGER_SEED_CATALOG", True),
            log_level=os.getenv("ADLEDGER_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger("adledger").setLevel(settings.log_level)
