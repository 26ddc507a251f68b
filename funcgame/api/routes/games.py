from __future__ import annotations

from typing import Tuple

from fastapi import APIRouter, Depends, Response

from funcgame.api.deps import get_page_bounds, get_store
from funcgame.schemas.games import GameCreateRequest, GameStatusRequest, GameUpdateRequest
from funcgame.schemas.steps import StepCreateRequest
from funcgame.services.common import build_patch, one_or_404, page_payload, rows_or_404, utc_now_iso
from funcgame.store import SupabaseStore, eq

router = APIRouter(prefix="/games", tags=["games"])

FINISHED_STATUS = "finished"


@router.post("", status_code=201)
async def create_game(req: GameCreateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.insert("games", [req.model_dump(exclude_unset=True)])
    return result.rows


@router.get("")
async def list_games(
    bounds: Tuple[int, int] = Depends(get_page_bounds),
    store: SupabaseStore = Depends(get_store),
):
    start, end = bounds
    return page_payload(await store.select("games", start=start, end=end, count=True))


@router.get("/user/{user_id}")
async def get_games_by_user(user_id: str, store: SupabaseStore = Depends(get_store)):
    # Games a user owns, matched on creator_id like /creator/{creator_id}.
    result = await store.select("games", filters=[eq("creator_id", user_id)])
    return result.rows


@router.get("/creator/{creator_id}")
async def get_games_by_creator(creator_id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("games", filters=[eq("creator_id", creator_id)])
    return result.rows


@router.post("/steps", status_code=201)
async def add_step_to_game(req: StepCreateRequest, store: SupabaseStore = Depends(get_store)):
    """Record one turn of a game in the steps table."""
    result = await store.insert("steps", [req.model_dump(exclude_unset=True)])
    return result.rows


@router.get("/{id}")
async def get_game(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("games", filters=[eq("id", id)], limit=1)
    return one_or_404(result, "Game")


@router.put("/{id}")
async def update_game(id: str, req: GameUpdateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.update("games", build_patch(req), filters=[eq("id", id)])
    return rows_or_404(result, "Game")


@router.put("/{id}/status")
async def update_game_status(id: str, req: GameStatusRequest, store: SupabaseStore = Depends(get_store)):
    patch = req.model_dump(exclude_unset=True)
    patch["updated_at"] = utc_now_iso()
    result = await store.update("games", patch, filters=[eq("id", id)])
    return rows_or_404(result, "Game")


@router.put("/{id}/finish")
async def finish_game(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.update(
        "games",
        {"status": FINISHED_STATUS, "finished_at": utc_now_iso()},
        filters=[eq("id", id)],
    )
    return rows_or_404(result, "Game")


@router.get("/{id}/steps")
async def get_game_steps(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("game_id", id)])
    return result.rows


@router.delete("/{id}", status_code=204)
async def delete_game(id: str, store: SupabaseStore = Depends(get_store)):
    await store.delete("games", filters=[eq("id", id)])
    return Response(status_code=204)
