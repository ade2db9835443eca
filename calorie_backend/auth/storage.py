# -*- coding: utf-8 -*-
"""Auth — DB storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email.lower().strip(),)).fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def create_user(
    *,
    name: str,
    email: str,
    password_hash: str,
    height_cm: float,
    weight_kg: float,
    body_type: str,
    goal: str,
    daily_calorie_goal: int,
    daily_protein_goal: int,
    profile_photo: Optional[str] = None,
    is_approved: bool = False,
    is_admin: bool = False,
) -> Dict[str, Any]:
    row = {
        "id": str(uuid4()),
        "name": name,
        "email": email.lower().strip(),
        "password_hash": password_hash,
        "height_cm": float(height_cm),
        "weight_kg": float(weight_kg),
        "body_type": body_type,
        "goal": goal,
        "profile_photo": profile_photo,
        "is_approved": int(is_approved),
        "is_admin": int(is_admin),
        "daily_calorie_goal": int(daily_calorie_goal),
        "daily_protein_goal": int(daily_protein_goal),
        "created_at": _utc_now(),
    }
    columns = ", ".join(row.keys())
    placeholders = ", ".join("?" for _ in row)
    with db_conn(settings.db_path) as conn:
        conn.execute(f"INSERT INTO users ({columns}) VALUES ({placeholders})", tuple(row.values()))
    return row


def list_pending_users() -> List[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            """
            SELECT id, name, email, profile_photo, goal, body_type, created_at
            FROM users
            WHERE is_approved = 0 AND is_admin = 0
            ORDER BY created_at DESC
            """
        ).fetchall()
    return [dict(r) for r in rows]


def approve_user(user_id: str) -> bool:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute("UPDATE users SET is_approved = 1 WHERE id = ?", (user_id,))
        return cur.rowcount > 0


def delete_user(user_id: str) -> bool:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cur.rowcount > 0
