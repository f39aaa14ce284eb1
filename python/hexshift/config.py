"""Search defaults, overridable from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_TURN_BUDGET = 20
DEFAULT_EXPANSION_CAP = 50_000

MIN_TURN_BUDGET = 0
# The start hex always counts as one expansion
MIN_EXPANSION_CAP = 1

TURN_BUDGET_ENV = "HEXSHIFT_TURN_BUDGET"
EXPANSION_CAP_ENV = "HEXSHIFT_EXPANSION_CAP"


class ConfigError(ValueError):
    pass


def _int_from_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class SearchConfig:
    turn_budget: int = DEFAULT_TURN_BUDGET
    expansion_cap: int = DEFAULT_EXPANSION_CAP

    def __post_init__(self) -> None:
        if self.turn_budget < MIN_TURN_BUDGET:
            raise ConfigError(f"turn budget must be at least {MIN_TURN_BUDGET}, got {self.turn_budget}")
        if self.expansion_cap < MIN_EXPANSION_CAP:
            raise ConfigError(f"expansion cap must be at least {MIN_EXPANSION_CAP}, got {self.expansion_cap}")

    @classmethod
    def from_env(cls) -> "SearchConfig":
        return cls(
            turn_budget=_int_from_env(TURN_BUDGET_ENV, DEFAULT_TURN_BUDGET, MIN_TURN_BUDGET),
            expansion_cap=_int_from_env(EXPANSION_CAP_ENV, DEFAULT_EXPANSION_CAP, MIN_EXPANSION_CAP),
        )

    def with_overrides(
        self,
        turn_budget: Optional[int] = None,
        expansion_cap: Optional[int] = None,
    ) -> "SearchConfig":
        """Apply command-line values on top of this config; ``None`` keeps the current one."""

        return SearchConfig(
            turn_budget=self.turn_budget if turn_budget is None else turn_budget,
            expansion_cap=self.expansion_cap if expansion_cap is None else expansion_cap,
        )
