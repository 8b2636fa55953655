from enum import Enum

from assessment.base import Band, band_table, classify, label_for


class AsymmetryCategory(str, Enum):
    NORMAL = "normal"
    MILD = "mild"
    MODERATE = "moderate"
    PRONOUNCED = "pronounced"


# Right/left difference in degrees, lower bounds inclusive.
ASYMMETRY_BANDS = (
    Band(float("-inf"), AsymmetryCategory.NORMAL, "Normal"),
    Band(5.0, AsymmetryCategory.MILD, "Mild"),
    Band(10.0, AsymmetryCategory.MODERATE, "Moderate"),
    Band(15.0, AsymmetryCategory.PRONOUNCED, "Pronounced"),
)


def asymmetry_difference(right_angle: float, left_angle: float) -> float:
    return abs(right_angle - left_angle)


def evaluate_asymmetry(right_angle: float, left_angle: float) -> AsymmetryCategory:
    return classify(asymmetry_difference(right_angle, left_angle), ASYMMETRY_BANDS)


def asymmetry_label(category: AsymmetryCategory) -> str:
    return label_for(AsymmetryCategory(category), ASYMMETRY_BANDS)


def asymmetry_reference():
    return band_table(ASYMMETRY_BANDS)
