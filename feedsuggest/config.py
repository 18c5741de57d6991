"""
Runtime settings, read from environment variables.

Call load_env() first when a .env file should be honoured; CLI flags
override whatever is found here.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_RPC_URL = "https://testnet1.helioschainlabs.org"


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    ledger_rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout: float = 10.0
    cache_ttl: float = 300.0
    default_limit: int = 5
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            ledger_rpc_url=env.get("FEEDSUGGEST_LEDGER_RPC_URL") or DEFAULT_RPC_URL,
            rpc_timeout=_env_float(env, "FEEDSUGGEST_RPC_TIMEOUT", 10.0),
            cache_ttl=_env_float(env, "FEEDSUGGEST_CACHE_TTL", 300.0),
            default_limit=_env_int(env, "FEEDSUGGEST_LIMIT", 5),
            log_level=(env.get("FEEDSUGGEST_LOG_LEVEL") or "INFO").upper(),
        )
