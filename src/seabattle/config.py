"""Game configuration."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, model_validator

# Guesses are two single digits, which caps the board at 10x10.
MAX_BOARD_SIZE = 10
MIN_BOARD_SIZE = 5

_ENV_FIELDS = {
    "board_size": "SEABATTLE_BOARD_SIZE",
    "num_ships": "SEABATTLE_NUM_SHIPS",
    "ship_length": "SEABATTLE_SHIP_LENGTH",
    "seed": "SEABATTLE_SEED",
}


class GameConfig(BaseModel):
    """Board and fleet dimensions for one match."""

    board_size: int = Field(default=10, ge=MIN_BOARD_SIZE, le=MAX_BOARD_SIZE)
    num_ships: int = Field(default=3, ge=1, le=10)
    ship_length: int = Field(default=3, ge=1)
    seed: int | None = None

    @model_validator(mode="after")
    def _ship_fits_board(self) -> "GameConfig":
        if self.ship_length > self.board_size:
            raise ValueError(
                f"ship_length ({self.ship_length}) cannot exceed board_size ({self.board_size})"
            )
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameConfig":
        """Construct config from `SEABATTLE_*` env vars; explicit overrides win."""

        data: Dict[str, Any] = {}
        for field, env_name in _ENV_FIELDS.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[field] = value.strip()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)


@lru_cache(maxsize=1)
def load_game_config() -> GameConfig:
    """Load and cache the game config from the environment."""

    return GameConfig.from_env()
