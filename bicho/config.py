"""Environment-based configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from bicho.utils.money import to_money

DEFAULT_STAKES = "0.05,0.10,0.20,0.50,1.00,2.00"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_seed() -> int | None:
    raw = os.getenv("BICHO_RNG_SEED")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Game table
    BICHO_STARTING_BALANCE: str = os.getenv("BICHO_STARTING_BALANCE", "100.00")
    BICHO_STAKES: str = os.getenv("BICHO_STAKES", DEFAULT_STAKES)
    BICHO_DEFAULT_STAKE_INDEX: str = os.getenv("BICHO_DEFAULT_STAKE_INDEX", "4")  # £1.00
    BICHO_STAKE_CAP: str = os.getenv("BICHO_STAKE_CAP", "10.00")
    BICHO_REVEAL_DELAY_SECONDS: str = os.getenv("BICHO_REVEAL_DELAY_SECONDS", "2.0")
    BICHO_RNG_SEED: int | None = _env_seed()
    BICHO_BLOCK_ON_INSUFFICIENT_FUNDS: bool = _env_flag("BICHO_BLOCK_ON_INSUFFICIENT_FUNDS")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Test configuration: deterministic RNG, no reveal delay."""

    DEBUG: bool = False
    TESTING: bool = True
    BICHO_RNG_SEED: int | None = 1234
    BICHO_REVEAL_DELAY_SECONDS: str = "0"


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig


@dataclass(frozen=True)
class GameSettings:
    """Typed engine settings derived from the Flask config mapping."""

    starting_balance: Decimal = Decimal("100.00")
    stakes: tuple[Decimal, ...] = tuple(to_money(s) for s in DEFAULT_STAKES.split(","))
    default_stake_index: int = 4
    stake_cap: Decimal = Decimal("10.00")
    reveal_delay_seconds: float = 2.0
    rng_seed: int | None = None
    block_on_insufficient_funds: bool = False

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "GameSettings":
        defaults = cls()
        stakes_raw = config.get("BICHO_STAKES")
        if isinstance(stakes_raw, str):
            stakes = tuple(to_money(s) for s in stakes_raw.split(",") if s.strip())
        elif stakes_raw:
            stakes = tuple(to_money(s) for s in stakes_raw)
        else:
            stakes = defaults.stakes
        if not stakes:
            raise ValueError("BICHO_STAKES must list at least one stake")

        seed = config.get("BICHO_RNG_SEED")
        return cls(
            starting_balance=to_money(config.get("BICHO_STARTING_BALANCE", defaults.starting_balance)),
            stakes=tuple(sorted(stakes)),
            default_stake_index=int(config.get("BICHO_DEFAULT_STAKE_INDEX", defaults.default_stake_index)),
            stake_cap=to_money(config.get("BICHO_STAKE_CAP", defaults.stake_cap)),
            reveal_delay_seconds=float(config.get("BICHO_REVEAL_DELAY_SECONDS", defaults.reveal_delay_seconds)),
            rng_seed=int(seed) if seed is not None else None,
            block_on_insufficient_funds=bool(config.get("BICHO_BLOCK_ON_INSUFFICIENT_FUNDS", False)),
        )
