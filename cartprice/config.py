from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from cartprice.engine import ResolutionPolicy
from cartprice.result import Err, Ok, Result

CATALOG_VAR = "CARTPRICE_CATALOG"
POLICY_VAR = "CARTPRICE_POLICY"
LOG_LEVEL_VAR = "CARTPRICE_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once from the environment."""

    catalog_path: Path | None = None
    """Catalog JSON file. ``None`` means the built-in demo catalog."""

    policy: ResolutionPolicy = ResolutionPolicy.GREEDY

    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls) -> Result[Settings, ValueError]:
        """Build settings from the environment, loading ``.env`` first."""
        load_dotenv()

        catalog = os.getenv(CATALOG_VAR, "").strip()
        policy_name = os.getenv(POLICY_VAR, ResolutionPolicy.GREEDY.value).strip().lower()
        level = os.getenv(LOG_LEVEL_VAR, "WARNING").strip().upper()

        try:
            policy = ResolutionPolicy(policy_name)
        except ValueError:
            choices = ", ".join(p.value for p in ResolutionPolicy)
            return Err(ValueError(f"{POLICY_VAR}={policy_name!r} is not one of: {choices}"))

        match level:
            case str(name) if name in _LOG_LEVELS:
                pass
            case _:
                return Err(ValueError(f"{LOG_LEVEL_VAR}={level!r} is not a log level"))

        return Ok(
            cls(
                catalog_path=Path(catalog) if catalog else None,
                policy=policy,
                log_level=level,
            )
        )
