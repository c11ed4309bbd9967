"""
Drink units.

A day's drinks are picked from a fixed set of presets and stored in
health_logs as two denormalized columns:

    alcohol_amount  total volume in ml (e.g. 1050)
    alcohol_type    "ビール (350ml)x2, ハイボール (350ml)x1"

parse_alcohol_type() reverses the text column so a saved day can be edited
again. Whatever volume the text cannot account for comes back as a single
"その他" entry.
"""

from __future__ import annotations

import itertools
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

# Grams of ethanol per ml of pure alcohol.
ETHANOL_DENSITY = 0.8


@dataclass(frozen=True)
class DrinkPreset:
    key: str
    label: str
    ml: int
    percent: float


@dataclass
class AddedDrink:
    id: int
    label: str
    ml: int
    count: int
    pure_alcohol: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DRINK_PRESETS: Dict[str, DrinkPreset] = {
    "beer350": DrinkPreset("beer350", "ビール (350ml)", 350, 5),
    "highball": DrinkPreset("highball", "ハイボール (350ml)", 350, 7),
    "chuhai": DrinkPreset("chuhai", "チューハイ (350ml)", 350, 5),
    "sake": DrinkPreset("sake", "日本酒 (1合)", 180, 15),
    "wine": DrinkPreset("wine", "ワイン (グラス)", 120, 12),
    "custom": DrinkPreset("custom", "手入力", 0, 0),
}

_PRESETS_BY_LABEL = {preset.label: preset for preset in DRINK_PRESETS.values()}

_PART_SPLIT = re.compile(r"\s*[,、]\s*")
_PART_PATTERN = re.compile(r"^(.+?)x(\d+)$")

_ids = itertools.count(1)


def _next_id() -> int:
    return next(_ids)


def pure_alcohol_grams(ml: float, percent: float) -> float:
    """Grams of pure alcohol in one serving."""
    return ml * (percent / 100) * ETHANOL_DENSITY


def make_drink(key: str, count: int = 1) -> AddedDrink:
    """
    Build an AddedDrink from a preset key.

    Raises KeyError for an unknown key and ValueError for count < 1.
    """
    preset = DRINK_PRESETS[key]
    if count < 1:
        raise ValueError(f"Drink count must be at least 1, got {count}")
    pure = pure_alcohol_grams(preset.ml, preset.percent)
    return AddedDrink(
        id=_next_id(),
        label=preset.label,
        ml=preset.ml,
        count=count,
        pure_alcohol=pure * count,
    )


def remove_drink(drinks: Iterable[AddedDrink], drink_id: int) -> List[AddedDrink]:
    return [d for d in drinks if d.id != drink_id]


def total_pure_alcohol(drinks: Iterable[AddedDrink]) -> float:
    return sum(d.pure_alcohol for d in drinks)


def aggregate_drinks(drinks: Iterable[AddedDrink]) -> Tuple[int, str]:
    """
    Collapse drinks into (total_ml, alcohol_type) for storage.
    """
    total_ml = 0
    types: List[str] = []
    for d in drinks:
        total_ml += d.ml * d.count
        types.append(f"{d.label}x{d.count}")
    return total_ml, ", ".join(types)


def parse_alcohol_type(
    alcohol_type: Optional[str],
    alcohol_amount_ml: Optional[float],
) -> List[AddedDrink]:
    """
    Restore AddedDrink entries from the stored alcohol_type text.

    Only parts whose label is a known preset are restored. If the stored
    amount is larger than what those parts add up to, the rest becomes one
    "その他 (Nml)" entry with no pure-alcohol estimate. Blank text restores
    nothing, whatever the amount.
    """
    result: List[AddedDrink] = []
    if not alcohol_type or not alcohol_type.strip():
        return result

    parts = [p.strip() for p in _PART_SPLIT.split(alcohol_type)]
    total_ml_parsed = 0
    for part in filter(None, parts):
        match = _PART_PATTERN.match(part)
        if not match:
            continue
        label, count_str = match.groups()
        count = int(count_str) or 1
        preset = _PRESETS_BY_LABEL.get(label)
        if preset is None:
            continue
        pure = pure_alcohol_grams(preset.ml, preset.percent)
        result.append(
            AddedDrink(
                id=_next_id(),
                label=preset.label,
                ml=preset.ml,
                count=count,
                pure_alcohol=pure * count,
            )
        )
        total_ml_parsed += preset.ml * count

    amount = alcohol_amount_ml or 0
    if amount > total_ml_parsed and amount > 0:
        rest = _whole(amount - total_ml_parsed)
        result.append(
            AddedDrink(
                id=_next_id(),
                label=f"その他 ({rest}ml)",
                ml=rest,
                count=1,
                pure_alcohol=0,
            )
        )
    return result


def previous_alcohol_summary(alcohol_amount_ml: Optional[float]) -> str:
    """Note shown when a saved amount could not be itemised."""
    amount = alcohol_amount_ml or 0
    if amount > 0:
        return f"以前の記録: {_whole(amount)}ml"
    return ""


def preset_options() -> List[Dict[str, Any]]:
    return [
        {"key": p.key, "label": p.label, "ml": p.ml, "percent": p.percent}
        for p in DRINK_PRESETS.values()
    ]


def _whole(value: float):
    # 150.0 -> 150 so labels read "150ml", not "150.0ml"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
