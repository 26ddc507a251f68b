from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from funcgame.schemas.common import Passthrough, RowId


class TicketCreateRequest(BaseModel):
    user_id: Optional[RowId] = None
    subject: Optional[Passthrough] = None
    message: Optional[Passthrough] = None


class TicketUpdateRequest(BaseModel):
    subject: Optional[Passthrough] = None
    message: Optional[Passthrough] = None
    status: Optional[Passthrough] = None
    priority: Optional[Passthrough] = None  # numeric level or label
