# src/erlangfte/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional, TypeAlias, cast

SearchStrategy: TypeAlias = Literal["linear", "bisect"]

_STRATEGIES = ("linear", "bisect")


@dataclass(frozen=True)
class EngineSettings:
    # Decimal places kept when rounding offered load (Erlangs)
    intensity_places: int = 4
    # Significant digits for e^x in the service level formula
    exp_precision: int = 30
    # Upper bound for the agent search
    max_agents: int = 100_000
    search_strategy: SearchStrategy = "linear"
    # None lets ThreadPoolExecutor pick
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.intensity_places < 0:
            raise ValueError("intensity_places must be >= 0")
        if self.exp_precision <= 0:
            raise ValueError("exp_precision must be > 0")
        if self.max_agents < 1:
            raise ValueError("max_agents must be >= 1")
        if self.search_strategy not in _STRATEGIES:
            raise ValueError(f"Unsupported search_strategy: {self.search_strategy}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1 when provided")


def _env_value(env: Mapping[str, str], name: str) -> Optional[str]:
    """
    Return a stripped env value, or None when unset or blank.
    Blank counts as unset so App Service style "KEY=" entries keep the default.
    """
    raw = env.get(name, "").strip()
    return raw or None


def _env_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = _env_value(env, name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings_from_env(
    *,
    prefix: str = "ERLANGFTE_",
    env: Optional[Mapping[str, str]] = None,
) -> EngineSettings:
    """
    Build settings from environment variables, e.g.:
      ERLANGFTE_INTENSITY_PLACES=4
      ERLANGFTE_EXP_PRECISION=30
      ERLANGFTE_MAX_AGENTS=100000
      ERLANGFTE_SEARCH_STRATEGY=bisect
      ERLANGFTE_MAX_WORKERS=8
    Anything unset falls back to the EngineSettings default.
    """
    source = os.environ if env is None else env
    defaults = EngineSettings()

    places = _env_int(source, f"{prefix}INTENSITY_PLACES")
    precision = _env_int(source, f"{prefix}EXP_PRECISION")
    max_agents = _env_int(source, f"{prefix}MAX_AGENTS")
    max_workers = _env_int(source, f"{prefix}MAX_WORKERS")

    strategy = _env_value(source, f"{prefix}SEARCH_STRATEGY")
    if strategy is not None:
        strategy = strategy.lower()
        if strategy not in _STRATEGIES:
            raise ValueError(f"{prefix}SEARCH_STRATEGY must be one of {list(_STRATEGIES)}, got {strategy!r}")

    return EngineSettings(
        intensity_places=places if places is not None else defaults.intensity_places,
        exp_precision=precision if precision is not None else defaults.exp_precision,
        max_agents=max_agents if max_agents is not None else defaults.max_agents,
        search_strategy=cast(SearchStrategy, strategy) if strategy is not None else defaults.search_strategy,
        max_workers=max_workers if max_workers is not None else defaults.max_workers,
    )


__all__ = ["SearchStrategy", "EngineSettings", "load_settings_from_env"]
