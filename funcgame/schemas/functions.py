from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from funcgame.schemas.common import Passthrough, RowId


class FunctionCreateRequest(BaseModel):
    creator_id: Optional[RowId] = None
    expression: Optional[Passthrough] = None  # opaque formula text, e.g. "sin(x) * 2"
    y_min: Optional[Passthrough] = None
    y_max: Optional[Passthrough] = None


class FunctionUpdateRequest(BaseModel):
    expression: Optional[Passthrough] = None
    y_min: Optional[Passthrough] = None
    y_max: Optional[Passthrough] = None
