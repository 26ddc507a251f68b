from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from funcgame.schemas.common import Passthrough, RowId


class GameCreateRequest(BaseModel):
    creator_id: Optional[RowId] = None
    name: Optional[Passthrough] = None
    description: Optional[Passthrough] = None


class GameUpdateRequest(BaseModel):
    player1_id: Optional[RowId] = None
    player2_id: Optional[RowId] = None
    status: Optional[Passthrough] = None  # free-form, e.g. "active" | "finished"
    finished_at: Optional[Passthrough] = None  # ISO-8601 timestamp


class GameStatusRequest(BaseModel):
    status: Optional[Passthrough] = None
