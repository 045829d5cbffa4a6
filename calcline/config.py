"""Runtime settings for calcline.

Defaults live on the Settings dataclass; CALCLINE_* environment variables
override them, and CLI options override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_ENV_PREFIX = "CALCLINE_"


@dataclass(frozen=True)
class Settings:
    """Evaluator limits and host-loop presentation."""

    prompt: str = "> "
    precision: int = 6
    max_length: int = 4096
    max_depth: int = 100

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from CALCLINE_* variables.

        Args:
            env: Mapping to read from. Defaults to os.environ.

        Raises:
            ValueError: If a numeric variable is not a positive integer.
        """
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            prompt=env.get(f"{_ENV_PREFIX}PROMPT", defaults.prompt),
            precision=_positive_int(env, "PRECISION", defaults.precision),
            max_length=_positive_int(env, "MAX_LENGTH", defaults.max_length),
            max_depth=_positive_int(env, "MAX_DEPTH", defaults.max_depth),
        )


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    key = f"{_ENV_PREFIX}{name}"
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{key} must be at least 1, got {value}")
    return value
