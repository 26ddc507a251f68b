from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from funcgame.schemas.common import RowId


class UserCreateRequest(BaseModel):
    username: str
    password: str  # plain text; hashed before insert
    email: str


class UserUpdateRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None  # re-hashed when present


class LoginRequest(BaseModel):
    username: str
    password: str


class AssignRoleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: RowId = Field(..., alias="userId")
    role_id: RowId = Field(..., alias="roleId")
