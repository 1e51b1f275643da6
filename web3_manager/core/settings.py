"""Environment driven defaults for building a manager."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .manager import EMPTY_ACCOUNTS_HEAD


def _env_flag(name: str, *, default: bool = False, environ: Optional[Mapping[str, str]] = None) -> bool:
    raw = (os.environ if environ is None else environ).get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, *, default: int, environ: Optional[Mapping[str, str]] = None) -> int:
    raw = (os.environ if environ is None else environ).get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass
class ManagerSettings:
    library_name: str = "web3"
    empty_accounts_policy: str = EMPTY_ACCOUNTS_HEAD
    history_size: int = 200
    queue_size: int = 64
    overflow_strategy: str = "drop_oldest"
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ManagerSettings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            library_name=env.get("WEB3_MANAGER_LIBRARY_NAME", defaults.library_name),
            empty_accounts_policy=env.get(
                "WEB3_MANAGER_EMPTY_ACCOUNTS_POLICY", defaults.empty_accounts_policy
            ),
            history_size=_env_int(
                "WEB3_MANAGER_HISTORY_SIZE", default=defaults.history_size, environ=env
            ),
            queue_size=_env_int(
                "WEB3_MANAGER_QUEUE_SIZE", default=defaults.queue_size, environ=env
            ),
            overflow_strategy=env.get(
                "WEB3_MANAGER_OVERFLOW_STRATEGY", defaults.overflow_strategy
            ),
            log_level=env.get("WEB3_MANAGER_LOG_LEVEL", defaults.log_level).upper(),
            debug=_env_flag("WEB3_MANAGER_DEBUG", environ=env),
        )
