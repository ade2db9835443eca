# -*- coding: utf-8 -*-
"""Food log — DB storage helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from .models import DailySummaryResponse, FoodEntry, NutrientProgress


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _today() -> str:
    return date.today().isoformat()


def create_entry(
    *,
    user_id: str,
    food_name: str,
    weight_grams: float,
    calories: float,
    protein: float,
    image_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Insert an entry stamped with the server's local date and time."""
    stamp = now or datetime.now()
    row = {
        "id": str(uuid4()),
        "user_id": user_id,
        "food_name": food_name,
        "weight_grams": float(weight_grams),
        "calories": float(calories),
        "protein": float(protein),
        "entry_date": stamp.date().isoformat(),
        "entry_time": stamp.strftime("%H:%M:%S"),
        "image_path": image_path,
        "created_at": _utc_now(),
    }
    with db_conn(settings.db_path) as conn:
        conn.execute(
            """
            INSERT INTO food_entries (
                id, user_id, food_name, weight_grams, calories, protein,
                entry_date, entry_time, image_path, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                row["id"],
                row["user_id"],
                row["food_name"],
                row["weight_grams"],
                row["calories"],
                row["protein"],
                row["entry_date"],
                row["entry_time"],
                row["image_path"],
                row["created_at"],
            ),
        )
    return row


def list_entries_for_day(user_id: str, day: Optional[str] = None) -> List[FoodEntry]:
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM food_entries
            WHERE user_id = ? AND entry_date = ?
            ORDER BY entry_time DESC
            """,
            (user_id, day or _today()),
        ).fetchall()
    return [FoodEntry.model_validate(dict(r)) for r in rows]


def list_history(user_id: str, *, days: int = 7, today: Optional[date] = None) -> List[FoodEntry]:
    since = ((today or date.today()) - timedelta(days=int(days))).isoformat()
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM food_entries
            WHERE user_id = ? AND entry_date >= ?
            ORDER BY entry_date DESC, entry_time DESC
            """,
            (user_id, since),
        ).fetchall()
    return [FoodEntry.model_validate(dict(r)) for r in rows]


def delete_entry(user_id: str, entry_id: str) -> bool:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            "DELETE FROM food_entries WHERE id = ? AND user_id = ?",
            (entry_id, user_id),
        )
        return cur.rowcount > 0


def _progress(consumed: float, goal: float) -> NutrientProgress:
    remaining = max(0.0, goal - consumed)
    percent = min(100.0, consumed / goal * 100.0) if goal > 0 else 0.0
    return NutrientProgress(
        consumed=round(consumed, 1),
        goal=round(goal, 1),
        remaining=round(remaining, 1),
        percent=round(percent, 1),
    )


def compute_daily_summary(
    entries: List[FoodEntry],
    *,
    day: str,
    calorie_goal: float,
    protein_goal: float,
) -> DailySummaryResponse:
    calories = 0.0
    protein = 0.0
    weight = 0.0
    for entry in entries:
        calories += entry.calories
        protein += entry.protein
        weight += entry.weight_grams
    return DailySummaryResponse(
        date=day,
        entry_count=len(entries),
        total_weight_grams=round(weight, 1),
        calories=_progress(calories, float(calorie_goal)),
        protein=_progress(protein, float(protein_goal)),
        entries=entries,
    )


def get_daily_summary(user: Dict[str, Any], day: Optional[str] = None) -> DailySummaryResponse:
    day = day or _today()
    entries = list_entries_for_day(user["id"], day)
    return compute_daily_summary(
        entries,
        day=day,
        calorie_goal=float(user.get("daily_calorie_goal") or 0),
        protein_goal=float(user.get("daily_protein_goal") or 0),
    )
