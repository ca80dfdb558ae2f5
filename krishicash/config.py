"""
Environment configuration.

    KRISHICASH_ENV         development | production (default development)
    KRISHICASH_SAVE_DIR    directory for per-session save files (default unset, saves kept in memory)
    KRISHICASH_LOG_LEVEL   logging level name (default INFO)
    KRISHICASH_SEED        integer seed for event draws (default unseeded)
    ALLOWED_ORIGINS        comma-separated CORS origins (default *)
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    save_dir: Path | None = None
    log_level: str = "INFO"
    seed: int | None = None
    allowed_origins: tuple[str, ...] = ("*",)

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        environ = os.environ if environ is None else environ

        save_dir = environ.get("KRISHICASH_SAVE_DIR")
        seed = environ.get("KRISHICASH_SEED")
        if seed is not None and seed.strip():
            try:
                seed_value = int(seed)
            except ValueError:
                raise ValueError(f"KRISHICASH_SEED must be an integer, got {seed!r}")
        else:
            seed_value = None

        origins = tuple(
            origin.strip()
            for origin in environ.get("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        )

        return cls(
            env=environ.get("KRISHICASH_ENV", "development"),
            save_dir=Path(save_dir).expanduser() if save_dir else None,
            log_level=environ.get("KRISHICASH_LOG_LEVEL", "INFO").upper(),
            seed=seed_value,
            allowed_origins=origins or ("*",),
        )
