from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Response

from funcgame.api.deps import get_bcrypt_rounds, get_page_bounds, get_store
from funcgame.errors import AuthenticationFailed, ValidationFailed
from funcgame.schemas.users import AssignRoleRequest, LoginRequest, UserCreateRequest, UserUpdateRequest
from funcgame.services.common import (
    build_patch,
    one_or_404,
    page_payload,
    rows_or_404,
    strip_keys,
    utc_now_iso,
)
from funcgame.services.passwords import hash_password, verify_password
from funcgame.store import SupabaseStore, contains_ci, eq

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

# Create/update write the hash to `password`; login reads `password_hash`.
# Both names are kept until the users table is reconciled.
PASSWORD_WRITE_COLUMN = "password"
PASSWORD_READ_COLUMN = "password_hash"
_SECRET_COLUMNS = (PASSWORD_WRITE_COLUMN, PASSWORD_READ_COLUMN)


def _public(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [strip_keys(r, _SECRET_COLUMNS) for r in rows]


# -------------------------------------------------------------------------
# Literal paths (registered before /{id})
# -------------------------------------------------------------------------

@router.post("", status_code=201)
async def create_user(
    req: UserCreateRequest,
    store: SupabaseStore = Depends(get_store),
    rounds: int = Depends(get_bcrypt_rounds),
):
    hashed = await hash_password(req.password, rounds=rounds)
    result = await store.insert(
        "users",
        [{"username": req.username, PASSWORD_WRITE_COLUMN: hashed, "email": req.email}],
    )
    return _public(result.rows)


@router.get("")
async def list_users(
    bounds: Tuple[int, int] = Depends(get_page_bounds),
    store: SupabaseStore = Depends(get_store),
):
    start, end = bounds
    result = await store.select("users", start=start, end=end, count=True)
    result.rows = _public(result.rows)
    return page_payload(result)


@router.get("/check-availability")
async def check_availability(
    username: Optional[str] = None,
    email: Optional[str] = None,
    store: SupabaseStore = Depends(get_store),
):
    if not username and not email:
        raise ValidationFailed("Username or email is required")

    filters = []
    if username:
        filters.append(eq("username", username))
    if email:
        filters.append(eq("email", email))

    result = await store.select("users", columns="id", filters=filters)
    return {"isAvailable": len(result.rows) == 0}


@router.get("/search")
async def search_users(query: Optional[str] = None, store: SupabaseStore = Depends(get_store)):
    if not query:
        raise ValidationFailed("Search query is required")
    result = await store.select(
        "users",
        any_of=[contains_ci("username", query), contains_ci("email", query)],
    )
    return _public(result.rows)


@router.post("/login")
async def authenticate_user(req: LoginRequest, store: SupabaseStore = Depends(get_store)):
    """Password check only; no session or token is issued.

    Unknown username and wrong password produce the same 401.
    """
    result = await store.select("users", filters=[eq("username", req.username)], limit=1)
    user = result.first()
    if user is None:
        raise AuthenticationFailed()

    stored_hash = user.get(PASSWORD_READ_COLUMN)
    if stored_hash is None:
        logger.warning(
            "login: user id=%s has no %r column; create stores the hash in %r",
            user.get("id"),
            PASSWORD_READ_COLUMN,
            PASSWORD_WRITE_COLUMN,
        )
        raise AuthenticationFailed()

    if not await verify_password(req.password, stored_hash):
        raise AuthenticationFailed()

    return {"id": user.get("id"), "username": user.get("username"), "email": user.get("email")}


@router.post("/assign-role", status_code=201)
async def assign_role_to_user(req: AssignRoleRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.insert(
        "user_roles",
        [{"user_id": req.user_id, "role_id": req.role_id, "assigned_at": utc_now_iso()}],
    )
    return result.rows


# -------------------------------------------------------------------------
# By id
# -------------------------------------------------------------------------

@router.get("/{id}")
async def get_user(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("users", filters=[eq("id", id)], limit=1)
    return strip_keys(one_or_404(result, "User"), _SECRET_COLUMNS)


@router.put("/{id}")
async def update_user(
    id: str,
    req: UserUpdateRequest,
    store: SupabaseStore = Depends(get_store),
    rounds: int = Depends(get_bcrypt_rounds),
):
    patch = build_patch(req)
    if "password" in patch:
        patch[PASSWORD_WRITE_COLUMN] = await hash_password(patch.pop("password"), rounds=rounds)

    result = await store.update("users", patch, filters=[eq("id", id)])
    return _public(rows_or_404(result, "User"))


@router.delete("/{id}", status_code=204)
async def delete_user(id: str, store: SupabaseStore = Depends(get_store)):
    await store.delete("users", filters=[eq("id", id)])
    return Response(status_code=204)


@router.get("/{id}/roles")
async def get_user_roles(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("user_roles", columns="role_id, roles(name)", filters=[eq("user_id", id)])
    return result.rows


@router.delete("/{user_id}/roles/{role_id}", status_code=204)
async def remove_role_from_user(user_id: str, role_id: str, store: SupabaseStore = Depends(get_store)):
    await store.delete("user_roles", filters=[eq("user_id", user_id), eq("role_id", role_id)])
    return Response(status_code=204)


@router.get("/{id}/statistics")
async def get_user_statistics(id: str, store: SupabaseStore = Depends(get_store)):
    """Three independent counts fetched concurrently.

    Not a snapshot: rows may change between the three reads.
    """
    games_count, tickets_count, functions_count = await asyncio.gather(
        store.count("games", any_of=[eq("player1_id", id), eq("player2_id", id)]),
        store.count("tickets", filters=[eq("user_id", id)]),
        store.count("functions", filters=[eq("creator_id", id)]),
    )
    return {"gamesCount": games_count, "ticketsCount": tickets_count, "functionsCount": functions_count}


@router.get("/{id}/functions")
async def get_user_functions(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("functions", filters=[eq("creator_id", id)])
    return result.rows


@router.get("/{id}/steps")
async def get_user_steps(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("player_id", id)])
    return result.rows
