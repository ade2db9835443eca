# -*- coding: utf-8 -*-
"""Food log — API endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from ..auth.security import get_current_user
from .models import AnalyzeFoodImageResponse, DailySummaryResponse, FoodEntry, FoodEntryCreateResponse
from .storage import create_entry, delete_entry, get_daily_summary, list_entries_for_day, list_history
from .uploads import save_image_upload
from .vision import UpstreamUnavailable, analyze_food_image

router = APIRouter(prefix="/api", tags=["Food"])


@router.post(
    "/food-entries",
    response_model=FoodEntryCreateResponse,
    status_code=201,
    summary="Add a food entry",
)
def add_food_entry(
    food_name: str = Form(..., alias="foodName", min_length=1, max_length=255),
    weight: float = Form(..., ge=0, allow_inf_nan=False),
    calories: float = Form(..., ge=0, allow_inf_nan=False),
    protein: float = Form(..., ge=0, allow_inf_nan=False),
    food_image: UploadFile | None = File(default=None, alias="foodImage"),
    user: dict = Depends(get_current_user),
):
    image_name = None
    if food_image is not None and food_image.filename:
        image_name = save_image_upload(food_image, field_name="foodImage").filename

    row = create_entry(
        user_id=user["id"],
        food_name=food_name.strip(),
        weight_grams=weight,
        calories=calories,
        protein=protein,
        image_path=image_name,
    )
    return FoodEntryCreateResponse(message="Food entry added successfully", id=row["id"])


@router.post(
    "/analyze-food-image",
    response_model=AnalyzeFoodImageResponse,
    summary="Estimate nutrition from a food photo",
)
def analyze_food_image_endpoint(
    food_image: UploadFile | None = File(default=None, alias="foodImage"),
    user: dict = Depends(get_current_user),  # noqa: ARG001
):
    if food_image is None or not food_image.filename:
        raise HTTPException(status_code=400, detail="No image uploaded")

    stored = save_image_upload(food_image, field_name="foodImage")
    try:
        image_bytes = stored.path.read_bytes()
    except OSError as exc:
        raise HTTPException(status_code=500, detail="Failed to read uploaded image") from exc

    try:
        analysis = analyze_food_image(image_bytes, stored.content_type)
    except UpstreamUnavailable as exc:
        raise HTTPException(status_code=502, detail=f"Vision model failed to analyze image: {exc}") from exc

    return AnalyzeFoodImageResponse(analysis=analysis, image_path=stored.filename)


@router.get("/food-entries/today", response_model=List[FoodEntry], summary="Today's food entries")
def today_entries(user: dict = Depends(get_current_user)):
    return list_entries_for_day(user["id"])


@router.get("/food-entries/history", response_model=List[FoodEntry], summary="Food history")
def history(
    days: int = Query(default=7, ge=1, le=365),
    user: dict = Depends(get_current_user),
):
    return list_history(user["id"], days=days)


@router.get("/food-entries/summary", response_model=DailySummaryResponse, summary="Today's totals against goals")
def summary(user: dict = Depends(get_current_user)):
    return get_daily_summary(user)


@router.delete("/food-entries/{entry_id}", summary="Delete a food entry")
def remove_entry(entry_id: str, user: dict = Depends(get_current_user)):
    if not delete_entry(user["id"], entry_id):
        raise HTTPException(status_code=404, detail="Food entry not found")
    return {"status": "ok"}
