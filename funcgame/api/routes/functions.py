from __future__ import annotations

from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, Response

from funcgame.api.deps import get_page_bounds, get_store
from funcgame.errors import ValidationFailed
from funcgame.schemas.functions import FunctionCreateRequest, FunctionUpdateRequest
from funcgame.services.common import build_patch, one_or_404, page_payload, rows_or_404
from funcgame.store import SupabaseStore, contains_ci, eq, gte, lte

router = APIRouter(prefix="/functions", tags=["functions"])


@router.post("", status_code=201)
async def create_function(req: FunctionCreateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.insert("functions", [req.model_dump(exclude_unset=True)])
    return result.rows


@router.get("")
async def list_functions(
    bounds: Tuple[int, int] = Depends(get_page_bounds),
    store: SupabaseStore = Depends(get_store),
):
    start, end = bounds
    return page_payload(await store.select("functions", start=start, end=end, count=True))


@router.get("/search")
async def search_functions(query: Optional[str] = None, store: SupabaseStore = Depends(get_store)):
    """Case-insensitive substring match on expression."""
    if not query:
        raise ValidationFailed("Search query is required")
    result = await store.select("functions", filters=[contains_ci("expression", query)])
    return result.rows


@router.get("/range")
async def get_functions_by_range(
    lower: Optional[float] = Query(None, alias="min"),
    upper: Optional[float] = Query(None, alias="max"),
    store: SupabaseStore = Depends(get_store),
):
    """Functions whose [y_min, y_max] lies inside [min, max]."""
    if lower is None or upper is None:
        raise ValidationFailed("min and max are required")
    result = await store.select("functions", filters=[gte("y_min", lower), lte("y_max", upper)])
    return result.rows


@router.get("/user/{user_id}")
async def get_functions_by_user(user_id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("functions", filters=[eq("creator_id", user_id)])
    return result.rows


@router.get("/{id}")
async def get_function(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("functions", filters=[eq("id", id)], limit=1)
    return one_or_404(result, "Function")


@router.put("/{id}")
async def update_function(id: str, req: FunctionUpdateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.update("functions", build_patch(req), filters=[eq("id", id)])
    return rows_or_404(result, "Function")


@router.delete("/{id}", status_code=204)
async def delete_function(id: str, store: SupabaseStore = Depends(get_store)):
    await store.delete("functions", filters=[eq("id", id)])
    return Response(status_code=204)
