from __future__ import annotations

from typing import Optional

import bcrypt
from fastapi.concurrency import run_in_threadpool

from funcgame.config import DEFAULT_BCRYPT_ROUNDS

# bcrypt only reads the first 72 bytes; newer releases raise instead of truncating.
BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def _hash_sync(password: str, rounds: int) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _check_sync(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_secret(password), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


async def hash_password(password: str, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    return await run_in_threadpool(_hash_sync, password, rounds)


async def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not password or not hashed:
        return False
    return await run_in_threadpool(_check_sync, password, str(hashed))
