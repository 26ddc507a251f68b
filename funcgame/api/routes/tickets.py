from __future__ import annotations

from typing import Tuple

from fastapi import APIRouter, Depends, Response

from funcgame.api.deps import get_page_bounds, get_store
from funcgame.schemas.tickets import TicketCreateRequest, TicketUpdateRequest
from funcgame.services.common import build_patch, one_or_404, page_payload, rows_or_404
from funcgame.store import SupabaseStore, eq

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("", status_code=201)
async def create_ticket(req: TicketCreateRequest, store: SupabaseStore = Depends(get_store)):
    result = await store.insert("tickets", [req.model_dump(exclude_unset=True)])
    return result.rows


@router.get("")
async def list_tickets(
    bounds: Tuple[int, int] = Depends(get_page_bounds),
    store: SupabaseStore = Depends(get_store),
):
    start, end = bounds
    return page_payload(await store.select("tickets", start=start, end=end, count=True))


@router.get("/user/{user_id}")
async def get_tickets_by_user(user_id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("tickets", filters=[eq("user_id", user_id)])
    return result.rows


@router.get("/{id}")
async def get_ticket(id: str, store: SupabaseStore = Depends(get_store)):
    result = await store.select("tickets", filters=[eq("id", id)], limit=1)
    return one_or_404(result, "Ticket")


@router.put("/{id}")
async def update_ticket(id: str, req: TicketUpdateRequest, store: SupabaseStore = Depends(get_store)):
    # Tickets take every field that was sent, explicit nulls included.
    patch = build_patch(req, drop_falsy=False)
    result = await store.update("tickets", patch, filters=[eq("id", id)])
    return rows_or_404(result, "Ticket")


@router.delete("/{id}", status_code=204)
async def delete_ticket(id: str, store: SupabaseStore = Depends(get_store)):
    await store.delete("tickets", filters=[eq("id", id)])
    return Response(status_code=204)
