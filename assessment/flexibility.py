from enum import Enum

from assessment.base import Band, band_table, classify, label_for


class FlexibilityCategory(str, Enum):
    STIFF = "stiff"
    SLIGHTLY_STIFF = "slightly_stiff"
    NORMAL = "normal"
    FLEXIBLE = "flexible"


# Lateral flexion in degrees, lower bounds inclusive.
FLEXIBILITY_BANDS = (
    Band(float("-inf"), FlexibilityCategory.STIFF, "Stiff"),
    Band(30.0, FlexibilityCategory.SLIGHTLY_STIFF, "Slightly stiff"),
    Band(40.0, FlexibilityCategory.NORMAL, "Normal"),
    Band(50.0, FlexibilityCategory.FLEXIBLE, "Flexible"),
)


def evaluate_flexibility(angle: float) -> FlexibilityCategory:
    return classify(angle, FLEXIBILITY_BANDS)


def flexibility_label(category: FlexibilityCategory) -> str:
    return label_for(FlexibilityCategory(category), FLEXIBILITY_BANDS)


def flexibility_reference():
    return band_table(FLEXIBILITY_BANDS)
