"""Runtime configuration for the Pokédex viewer.

Values come from the environment (a local ``.env`` file is loaded when
present). Every setting has a default that points at the public
PokéAPI, so the application runs without any configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


MODES = ("cursor", "client")


def _get_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Immutable container for runtime parameters."""

    api_base: str = "https://pokeapi.co/api/v2"
    mode: str = "cursor"
    page_size: int = 20
    # Number of records pulled in one go when the whole collection is
    # filtered client-side.
    fetch_limit: int = 151
    timeout: float = 10.0
    max_workers: int = 8
    title: str = "Pokédex"

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"Unknown pagination mode {self.mode!r}, expected one of {MODES}")

    @property
    def collection_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/pokemon"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_base=os.getenv("POKEDEX_API_BASE", cls.api_base),
            mode=os.getenv("POKEDEX_MODE", cls.mode).strip().lower(),
            page_size=_get_int("POKEDEX_PAGE_SIZE", cls.page_size),
            fetch_limit=_get_int("POKEDEX_FETCH_LIMIT", cls.fetch_limit),
            timeout=_get_float("POKEDEX_TIMEOUT", cls.timeout),
            max_workers=_get_int("POKEDEX_MAX_WORKERS", cls.max_workers),
            title=os.getenv("POKEDEX_TITLE", cls.title),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
