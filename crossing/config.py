"""
Configuration - Game setup values and environment settings.

Game setup comes from the player (monster count, human count, boat
capacity). Everything else is read from the environment once at import.
"""

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Environment configuration
CROSSING_ENV = os.getenv("CROSSING_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
VOYAGE_SECONDS = float(os.getenv("CROSSING_VOYAGE_SECONDS", "2.0"))
FEAST_SECONDS = float(os.getenv("CROSSING_FEAST_SECONDS", "3.0"))
SESSION_MAX_AGE_SECONDS = int(os.getenv("CROSSING_SESSION_MAX_AGE", "3600"))

DEFAULT_MONSTERS = 3
DEFAULT_HUMANS = 3
DEFAULT_BOAT_CAPACITY = 2
MIN_CREW = 1


class GameConfig(BaseModel):
    """The three player-chosen counts. Each must be an integer >= 1."""
    model_config = ConfigDict(frozen=True, strict=True)

    num_monsters: int = Field(DEFAULT_MONSTERS, ge=1, description="Number of monsters")
    num_humans: int = Field(DEFAULT_HUMANS, ge=1, description="Number of humans")
    boat_capacity: int = Field(DEFAULT_BOAT_CAPACITY, ge=1, description="Seats on the boat")


def field_errors(error: ValidationError) -> dict[str, str]:
    """Map a GameConfig validation error to {field: message}, one per input."""
    errors: dict[str, str] = {}
    for item in error.errors():
        name = str(item["loc"][0]) if item["loc"] else "config"
        errors.setdefault(name, "must be an integer of at least 1")
    return errors
