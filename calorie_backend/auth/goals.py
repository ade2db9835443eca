# -*- coding: utf-8 -*-
"""Daily calorie/protein targets derived from body type, goal and body weight."""

from __future__ import annotations

import math
from typing import Dict, Tuple

from .models import BodyType, Goal

CALORIE_GOALS: Dict[Goal, Dict[BodyType, int]] = {
    Goal.weight_gain: {BodyType.lean: 2800, BodyType.bulk: 3200, BodyType.normal: 2600},
    Goal.weight_loss: {BodyType.lean: 1800, BodyType.bulk: 2200, BodyType.normal: 2000},
}

# grams of protein per kg of body weight
PROTEIN_PER_KG: Dict[Goal, float] = {
    Goal.weight_gain: 1.8,
    Goal.weight_loss: 1.6,
}


def compute_daily_goals(*, body_type: BodyType, goal: Goal, weight_kg: float) -> Tuple[int, int]:
    """Return (daily_calorie_goal, daily_protein_goal)."""
    calories = CALORIE_GOALS[goal][body_type]
    protein = math.ceil(weight_kg * PROTEIN_PER_KG[goal])
    return calories, protein
