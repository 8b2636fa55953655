from assessment.asymmetry import (
    ASYMMETRY_BANDS,
    AsymmetryCategory,
    asymmetry_difference,
    asymmetry_label,
    asymmetry_reference,
    evaluate_asymmetry,
)
from assessment.flexibility import (
    FLEXIBILITY_BANDS,
    FlexibilityCategory,
    evaluate_flexibility,
    flexibility_label,
    flexibility_reference,
)
from assessment.recommendations import generate_recommendations

__all__ = [
    "ASYMMETRY_BANDS",
    "AsymmetryCategory",
    "asymmetry_difference",
    "asymmetry_label",
    "asymmetry_reference",
    "evaluate_asymmetry",
    "FLEXIBILITY_BANDS",
    "FlexibilityCategory",
    "evaluate_flexibility",
    "flexibility_label",
    "flexibility_reference",
    "generate_recommendations",
]
