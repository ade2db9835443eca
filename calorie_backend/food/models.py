# -*- coding: utf-8 -*-
"""Food log — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NutritionEstimate(BaseModel):
    """Four-field estimate for one food photo. JSON names match the web client."""

    model_config = ConfigDict(populate_by_name=True)

    food_name: str = Field(..., alias="foodName", min_length=1)
    weight: float = Field(..., ge=0, description="Estimated grams")
    calories: float = Field(..., ge=0, description="kcal")
    protein: float = Field(..., ge=0, description="Protein grams")


class AnalyzeFoodImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analysis: NutritionEstimate
    image_path: str = Field(..., alias="imagePath")


class FoodEntry(BaseModel):
    id: str
    user_id: str
    food_name: str
    weight_grams: float
    calories: float
    protein: float
    entry_date: str = Field(..., description="YYYY-MM-DD")
    entry_time: str = Field(..., description="HH:MM:SS")
    image_path: Optional[str] = None
    created_at: str


class FoodEntryCreateResponse(BaseModel):
    message: str
    id: str


class NutrientProgress(BaseModel):
    consumed: float = Field(0.0, ge=0)
    goal: float = Field(0.0, ge=0)
    remaining: float = Field(0.0, ge=0)
    percent: float = Field(0.0, ge=0, le=100)


class DailySummaryResponse(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    entry_count: int = Field(0, ge=0)
    total_weight_grams: float = Field(0.0, ge=0)
    calories: NutrientProgress
    protein: NutrientProgress
    entries: List[FoodEntry] = []
