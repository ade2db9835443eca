# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from ..config import settings
from ..food.uploads import save_image_upload
from .goals import compute_daily_goals
from .models import BodyType, Goal, LoginRequest, LoginResponse, MessageResponse, UserPublic
from .security import create_access_token, hash_password, verify_password
from .storage import create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def _user_public(row: dict) -> UserPublic:
    return UserPublic(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        is_admin=bool(row["is_admin"]),
        profile_photo=row.get("profile_photo"),
        daily_calorie_goal=row["daily_calorie_goal"],
        daily_protein_goal=row["daily_protein_goal"],
    )


@router.post("/register", response_model=MessageResponse, status_code=201, summary="Register a new user")
def register(
    name: str = Form(..., min_length=1, max_length=255),
    email: str = Form(..., min_length=3, max_length=254),
    password: str = Form(..., min_length=1, max_length=128),
    height: float = Form(..., gt=0, allow_inf_nan=False),
    weight: float = Form(..., gt=0, allow_inf_nan=False),
    body_type: BodyType = Form(..., alias="bodyType"),
    goal: Goal = Form(...),
    profile_photo: UploadFile | None = File(default=None, alias="profilePhoto"),
):
    if get_user_by_email(email):
        raise HTTPException(status_code=400, detail="User already exists")

    photo_name = None
    if profile_photo is not None and profile_photo.filename:
        photo_name = save_image_upload(profile_photo, field_name="profilePhoto").filename

    calorie_goal, protein_goal = compute_daily_goals(body_type=body_type, goal=goal, weight_kg=weight)
    create_user(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        height_cm=height,
        weight_kg=weight,
        body_type=body_type.value,
        goal=goal.value,
        profile_photo=photo_name,
        daily_calorie_goal=calorie_goal,
        daily_protein_goal=protein_goal,
    )
    return MessageResponse(message="User registered successfully. Awaiting admin approval.")


@router.post("/login", response_model=LoginResponse, summary="Login")
def login(request: LoginRequest):
    user = get_user_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=400, detail="Invalid credentials")

    if not user["is_approved"] and not user["is_admin"]:
        raise HTTPException(status_code=403, detail="Awaiting admin approval")

    token = create_access_token(user_id=user["id"], email=user["email"])
    return LoginResponse(token=token, user=_user_public(user))


def seed_admin_user() -> None:
    """Create the configured admin account once; no-op when unset or already present."""
    if not settings.admin_email or not settings.admin_password:
        return
    if get_user_by_email(settings.admin_email):
        return
    calorie_goal, protein_goal = compute_daily_goals(body_type=BodyType.normal, goal=Goal.weight_gain, weight_kg=70)
    create_user(
        name=settings.admin_name,
        email=settings.admin_email,
        password_hash=hash_password(settings.admin_password),
        height_cm=175,
        weight_kg=70,
        body_type=BodyType.normal.value,
        goal=Goal.weight_gain.value,
        daily_calorie_goal=calorie_goal,
        daily_protein_goal=protein_goal,
        is_approved=True,
        is_admin=True,
    )
    logger.info("Seeded admin user %s", settings.admin_email)
