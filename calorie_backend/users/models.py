# -*- coding: utf-8 -*-
"""Users — Pydantic models for admin approvals and profile.

Field names are the raw column names the web client reads (``body_type``,
``profile_photo``, ``daily_calorie_goal``...), unlike the camelCase login payload.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ApprovalAction(str, Enum):
    approve = "approve"
    reject = "reject"


class ApprovalRequest(BaseModel):
    # Plain str so unknown actions get the 400 "Invalid action" rather than a 422.
    action: str = Field(..., description="approve | reject")


class PendingUser(BaseModel):
    id: str
    name: str
    email: str
    profile_photo: Optional[str] = None
    goal: str
    body_type: str
    created_at: str


class Profile(BaseModel):
    id: str
    name: str
    email: str
    height: float = Field(..., description="cm")
    weight: float = Field(..., description="kg")
    body_type: str
    goal: str
    profile_photo: Optional[str] = None
    daily_calorie_goal: int
    daily_protein_goal: int
    is_admin: bool = False
    created_at: str
