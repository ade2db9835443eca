# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BodyType(str, Enum):
    lean = "Lean"
    bulk = "Bulk"
    normal = "Normal"


class Goal(str, Enum):
    weight_gain = "Weight Gain"
    weight_loss = "Weight Loss"


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class MessageResponse(BaseModel):
    message: str


class UserPublic(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    is_admin: bool = Field(..., alias="isAdmin")
    profile_photo: Optional[str] = Field(None, alias="profilePhoto")
    daily_calorie_goal: int = Field(..., alias="dailyCalorieGoal")
    daily_protein_goal: int = Field(..., alias="dailyProteinGoal")


class LoginResponse(BaseModel):
    token: str
    user: UserPublic
