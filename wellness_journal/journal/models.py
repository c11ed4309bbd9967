from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from wellness_journal.journal.drinks import AddedDrink

# Stored values; these strings are what health_logs already holds.
PERIOD_NONE = "なし"
STOOL_NORMAL = "普通"
SLEEP_QUALITY_NORMAL = "普通"
TRIGGER_HABIT = "習慣"

DEFAULT_MOOD = 3
DEFAULT_PAIN = 1
DEFAULT_STRESS = 1


@dataclass
class UserModes:
    """
    Feature switches from user_settings. Each one opens a form section:

        mode_ibd      pain level + stool type
        mode_diet     weight, body fat, calories, protein, steps, exercise
        mode_alcohol  drinks + drinking reason
        mode_mental   stress, sleep quality, spending
    """

    mode_ibd: bool = False
    mode_diet: bool = False
    mode_alcohol: bool = False
    mode_mental: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "mode_ibd": self.mode_ibd,
            "mode_diet": self.mode_diet,
            "mode_alcohol": self.mode_alcohol,
            "mode_mental": self.mode_mental,
        }


@dataclass
class UserProfile:
    modes: UserModes = field(default_factory=UserModes)
    gender: str = "unspecified"
    medical_history: str = ""

    @classmethod
    def from_settings(cls, row: Optional[Dict[str, Any]]) -> "UserProfile":
        """Build from a user_settings row; no row means everything off."""
        if not row:
            return cls()
        return cls(
            modes=UserModes(
                mode_ibd=bool(row.get("mode_ibd")),
                mode_diet=bool(row.get("mode_diet")),
                mode_alcohol=bool(row.get("mode_alcohol")),
                mode_mental=bool(row.get("mode_mental")),
            ),
            gender=row.get("gender") or "unspecified",
            medical_history=row.get("medical_history") or "",
        )

    @property
    def is_female(self) -> bool:
        return self.gender == "female"


@dataclass
class RecordForm:
    """State of the daily record form for one date."""

    date: str
    memo: str = ""
    medication_taken: bool = False
    general_mood: int = DEFAULT_MOOD
    period_status: str = PERIOD_NONE
    meal_description: str = ""
    meal_image_base64: Optional[str] = None
    pain_level: int = DEFAULT_PAIN
    stool_type: str = STOOL_NORMAL
    drinks: List[AddedDrink] = field(default_factory=list)
    alcohol_trigger: str = TRIGGER_HABIT
    stress_level: int = DEFAULT_STRESS
    sleep_quality: str = SLEEP_QUALITY_NORMAL
    # Numeric inputs stay as text until the payload is built.
    spending: str = ""
    weight: str = ""
    body_fat: str = ""
    calories: str = ""
    protein: str = ""
    steps: str = ""
    exercise_minutes: str = ""
    previous_alcohol_summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "memo": self.memo,
            "medication_taken": self.medication_taken,
            "general_mood": self.general_mood,
            "period_status": self.period_status,
            "meal_description": self.meal_description,
            "meal_image_base64": self.meal_image_base64,
            "pain_level": self.pain_level,
            "stool_type": self.stool_type,
            "drinks": [d.to_dict() for d in self.drinks],
            "alcohol_trigger": self.alcohol_trigger,
            "stress_level": self.stress_level,
            "sleep_quality": self.sleep_quality,
            "spending": self.spending,
            "weight": self.weight,
            "body_fat": self.body_fat,
            "calories": self.calories,
            "protein": self.protein,
            "steps": self.steps,
            "exercise_minutes": self.exercise_minutes,
            "previous_alcohol_summary": self.previous_alcohol_summary,
        }
