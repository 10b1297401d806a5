from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

DEFAULT_PRESET = "beginner"
DEFAULT_POLL_MS = 1000


class BoardConfig(BaseModel):
    height: int = Field(..., ge=1)
    width: int = Field(..., ge=1)
    mines: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_mines_fit(self) -> "BoardConfig":
        if self.mines >= self.height * self.width:
            raise ValueError("too_many_mines_for_board")
        return self


PRESETS: Dict[str, BoardConfig] = {
    "beginner": BoardConfig(height=8, width=8, mines=10),
    "intermediate": BoardConfig(height=16, width=16, mines=40),
    "expert": BoardConfig(height=16, width=30, mines=99),
}


def get_preset(name: Optional[str]) -> BoardConfig:
    key = (name or DEFAULT_PRESET).lower()
    if key not in PRESETS:
        raise ValueError(f"unknown_preset: {name}")
    return PRESETS[key]


def _truthy(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


class Settings(BaseModel):
    poll_ms: int = Field(DEFAULT_POLL_MS, ge=1)
    seed: Optional[int] = None
    log_file: Optional[str] = None
    log_level: str = "INFO"
    colors: bool = True


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[Path] = None) -> Settings:
    """Read runtime settings from the environment.

    ``.env.local`` is loaded first when present; values already in the
    environment win. Pass ``env`` to read from a plain mapping instead.
    """
    if env is None:
        load_dotenv(dotenv_path=dotenv_path or Path(".env.local"))
        env = os.environ
    seed = env.get("MINESWEEPER_SEED")
    return Settings(
        poll_ms=int(env.get("MINESWEEPER_POLL_MS", DEFAULT_POLL_MS)),
        seed=int(seed) if seed not in (None, "") else None,
        log_file=env.get("MINESWEEPER_LOG_FILE") or None,
        log_level=env.get("MINESWEEPER_LOG_LEVEL", "INFO").upper(),
        colors=_truthy(env.get("MINESWEEPER_COLORS", "1")),
    )
