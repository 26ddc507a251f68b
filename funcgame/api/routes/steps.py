from __future__ import annotations

from typing import Tuple

from fastapi import APIRouter, Depends, Response

from funcgame.api.deps import get_page_bounds, get_store
from funcgame.schemas.steps import StepCreateRequest, StepUpdateRequest
from funcgame.services.common import build_patch, one_or_404, page_payload, rows_or_404
from funcgame.store import SupabaseStore, eq

router = APIRouter(prefix="/steps", tags=["steps"])


@router.post("", status_code=201)
async def create_step(req: StepCreateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.insert("steps", [req.model_dump(exclude_unset=True)])
    return result.rows


@router.get("")
async def list_steps(
    bounds: Tuple[int, int] = Depends(get_page_bounds),
    store: SupabaseStore = Depends(get_store),
):
    start, end = bounds
    return page_payload(await store.select("steps", start=start, end=end, count=True))


@router.get("/game/{game_id}")
async def get_steps_by_game(game_id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("game_id", game_id)])
    return result.rows


@router.get("/game/{game_id}/turn/{turn_number}")
async def get_steps_by_turn(game_id: str, turn_number: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("game_id", game_id), eq("turn_number", turn_number)])
    return result.rows


@router.get("/player/{player_id}")
async def get_steps_by_player(player_id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("player_id", player_id)])
    return result.rows


@router.get("/difficulty/{difficulty}")
async def get_steps_by_difficulty(difficulty: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("difficulty", difficulty)])
    return result.rows


@router.get("/function/{function_id}")
async def get_steps_by_function(function_id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("function_id", function_id)])
    return result.rows


@router.get("/{id}")
async def get_step(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("steps", filters=[eq("id", id)], limit=1)
    return one_or_404(result, "Step")


@router.put("/{id}")
async def update_step(id: str, req: StepUpdateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.update("steps", build_patch(req), filters=[eq("id", id)])
    return rows_or_404(result, "Step")


@router.delete("/{id}", status_code=204)
async def delete_step(id: str, store: SupabaseStore = Depends(get_store)):
    await store.delete("steps", filters=[eq("id", id)])
    return Response(status_code=204)
