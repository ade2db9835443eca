# -*- coding: utf-8 -*-
"""Users — admin approval workflow and profile endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user, require_admin
from ..auth.storage import approve_user, delete_user, list_pending_users
from .models import ApprovalAction, ApprovalRequest, PendingUser, Profile

router = APIRouter(prefix="/api", tags=["Users"])


@router.get("/admin/pending-users", response_model=List[PendingUser], summary="Users awaiting approval")
def pending_users(admin: dict = Depends(require_admin)):  # noqa: ARG001
    return [
        PendingUser(
            id=r["id"],
            name=r["name"],
            email=r["email"],
            profile_photo=r.get("profile_photo"),
            goal=r["goal"],
            body_type=r["body_type"],
            created_at=r["created_at"],
        )
        for r in list_pending_users()
    ]


@router.patch("/admin/users/{user_id}/approval", summary="Approve or reject a user")
def update_approval(user_id: str, request: ApprovalRequest, admin: dict = Depends(require_admin)):  # noqa: ARG001
    if request.action == ApprovalAction.approve.value:
        if not approve_user(user_id):
            raise HTTPException(status_code=404, detail="User not found")
        return {"message": "User approved successfully"}
    if request.action == ApprovalAction.reject.value:
        if not delete_user(user_id):
            raise HTTPException(status_code=404, detail="User not found")
        return {"message": "User rejected and removed"}
    raise HTTPException(status_code=400, detail="Invalid action")


@router.get("/profile", response_model=Profile, summary="Current user's profile")
def profile(user: dict = Depends(get_current_user)):
    return Profile(
        id=user["id"],
        name=user["name"],
        email=user["email"],
        height=user["height_cm"],
        weight=user["weight_kg"],
        body_type=user["body_type"],
        goal=user["goal"],
        profile_photo=user.get("profile_photo"),
        daily_calorie_goal=user["daily_calorie_goal"],
        daily_protein_goal=user["daily_protein_goal"],
        is_admin=bool(user["is_admin"]),
        created_at=user["created_at"],
    )
