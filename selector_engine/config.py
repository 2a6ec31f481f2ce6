"""
Engine configuration.

Defaults match the engine's documented behaviour; deployments can
override them through SELECTOR_ENGINE_* environment variables or a
.env file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """Configuration for the selector engine"""
    min_confidence: float = 0.3  # candidates must score strictly above this
    max_attempts: int = 5
    form_match_limit: int = 5
    positional_scan_limit: int = 20
    # Treat zero-match selectors as failing in generators and the executor
    remember_empty_selectors: bool = False
    verbose_logging: bool = False
    critical_intents: Tuple[str, ...] = field(default_factory=lambda: ("search", "login", "cart"))

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "EngineConfig":
        """Build a config from the environment, loading a .env file first"""
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        defaults = cls()
        critical = os.getenv("SELECTOR_ENGINE_CRITICAL_INTENTS")
        return cls(
            min_confidence=float(os.getenv("SELECTOR_ENGINE_MIN_CONFIDENCE", defaults.min_confidence)),
            max_attempts=int(os.getenv("SELECTOR_ENGINE_MAX_ATTEMPTS", defaults.max_attempts)),
            form_match_limit=int(os.getenv("SELECTOR_ENGINE_FORM_MATCH_LIMIT", defaults.form_match_limit)),
            positional_scan_limit=int(
                os.getenv("SELECTOR_ENGINE_POSITIONAL_SCAN_LIMIT", defaults.positional_scan_limit)
            ),
            remember_empty_selectors=_env_bool(
                "SELECTOR_ENGINE_REMEMBER_EMPTY", defaults.remember_empty_selectors
            ),
            verbose_logging=_env_bool("SELECTOR_ENGINE_VERBOSE", defaults.verbose_logging),
            critical_intents=(
                tuple(part.strip() for part in critical.split(",") if part.strip())
                if critical else defaults.critical_intents
            ),
        )
