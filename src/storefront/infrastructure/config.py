"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_DIR = Path("data")
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_TOKEN_TTL_MINUTES = 60


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES

    @staticmethod
    def from_env(environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        raw_ttl = env.get("STOREFRONT_TOKEN_TTL_MINUTES", str(DEFAULT_TOKEN_TTL_MINUTES))
        try:
            ttl = int(raw_ttl)
        except ValueError:
            raise ValueError(
                f"STOREFRONT_TOKEN_TTL_MINUTES must be an integer, got {raw_ttl!r}"
            ) from None
        if ttl <= 0:
            raise ValueError("STOREFRONT_TOKEN_TTL_MINUTES must be positive")
        return Settings(
            data_dir=Path(env.get("STOREFRONT_DATA_DIR", str(DEFAULT_DATA_DIR))),
            log_level=env.get("STOREFRONT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            token_ttl_minutes=ttl,
        )
