from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Band:
    lower: float
    category: Enum
    label: str


def classify(value: float, bands: Sequence[Band]):
    # Bands are sorted by lower bound; each covers [lower, next lower).
    category = bands[0].category
    for band in bands:
        if value >= band.lower:
            category = band.category
    return category


def label_for(category, bands: Sequence[Band]) -> str:
    for band in bands:
        if band.category == category:
            return band.label
    raise ValueError(f"Unknown category: {category!r}")


def band_table(bands: Sequence[Band]) -> Tuple[Tuple[str, str], ...]:
    rows = []
    for band, upper in zip(bands, list(bands[1:]) + [None]):
        if upper is None:
            rows.append((band.label, f"{band.lower:g}° or more"))
        elif band.lower == float("-inf"):
            rows.append((band.label, f"under {upper.lower:g}°"))
        else:
            rows.append((band.label, f"{band.lower:g}° to {upper.lower:g}°"))
    return tuple(rows)
