from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_BCRYPT_ROUNDS = 10
BCRYPT_ROUNDS_RANGE = (4, 31)


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def parse_cors_origins(raw: Optional[str]) -> List[str]:
    origins = [o.strip() for o in str(raw or "").split(",") if o.strip()]
    return origins or ["*"]


def cors_origins_from_env(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Allowed CORS origins.

    Read on its own, not through Settings: middleware is installed when the app
    module is imported, before the startup hook loads Settings.
    """
    env = os.environ if environ is None else environ
    return parse_cors_origins(env.get("FUNCGAME_CORS_ORIGINS"))


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the process environment.

    SUPABASE_URL and SUPABASE_ANON_KEY are required; everything else has a default.
    """
    env = os.environ if environ is None else environ

    url = (env.get("SUPABASE_URL") or "").strip()
    key = (env.get("SUPABASE_ANON_KEY") or "").strip()
    if not url or not key:
        raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be defined in the environment.")

    rounds = _int_env(env, "FUNCGAME_BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)
    lo, hi = BCRYPT_ROUNDS_RANGE
    if not lo <= rounds <= hi:
        raise ConfigError(f"FUNCGAME_BCRYPT_ROUNDS must be between {lo} and {hi}, got {rounds}")

    return Settings(
        supabase_url=url,
        supabase_key=key,
        host=(env.get("FUNCGAME_HOST") or DEFAULT_HOST).strip(),
        port=_int_env(env, "FUNCGAME_PORT", DEFAULT_PORT),
        log_level=(env.get("FUNCGAME_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
        bcrypt_rounds=rounds,
    )
