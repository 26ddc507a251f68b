from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from funcgame.schemas.common import Passthrough, RowId


class StepFields(BaseModel):
    """Every column the steps table is written with.

    Two field sets coexist: the turn set (player_id, turn_number, x_value,
    y_value, difficulty, result) and the answer set (step_number, function_id,
    user_answer). Both are optional until the table's intended shape is settled.
    """

    game_id: Optional[RowId] = None
    player_id: Optional[RowId] = None
    turn_number: Optional[Passthrough] = None
    x_value: Optional[Passthrough] = None
    y_value: Optional[Passthrough] = None
    difficulty: Optional[Passthrough] = None
    result: Optional[Passthrough] = None
    step_number: Optional[Passthrough] = None
    function_id: Optional[RowId] = None
    user_answer: Optional[Passthrough] = None


class StepCreateRequest(StepFields):
    pass


class StepUpdateRequest(StepFields):
    pass
