"""Advisory text for a pair of lateral-flexion results.

Rules are independent and additive. Output order is fixed: stiffness advice,
then asymmetry advice, then range/maintenance advice.
"""

from typing import List

from assessment.asymmetry import AsymmetryCategory, asymmetry_difference
from assessment.flexibility import FlexibilityCategory

BOTH_STIFF = (
    "Both sides are stiff. Stretch the neck sideways gently every day, holding each "
    "stretch for 20-30 seconds without bouncing."
)
SIDE_STIFF = (
    "Tilting toward your {side} is stiff ({angle:.1f}°). Stretch the opposite side of "
    "the neck by tilting toward your {side} and holding for 20-30 seconds."
)
SLIGHTLY_STIFF = (
    "Tilting toward your {sides} is slightly limited. Add light side-bending stretches "
    "after warming up, such as after a bath."
)
MILD_ASYMMETRY = (
    "There is a small left/right difference ({diff:.1f}°). Spend a little more time "
    "stretching toward your {side}."
)
MODERATE_ASYMMETRY = (
    "Tilting toward your {side} is noticeably more limited ({diff:.1f}° difference). "
    "Stretch that direction more and avoid habits that load one side, such as carrying "
    "a bag on the same shoulder or resting your head on one hand."
)
PRONOUNCED_ASYMMETRY = (
    "There is a large left/right difference ({diff:.1f}°). Check your everyday posture "
    "and desk setup for one-sided habits, and watch for the shoulders hiking up when "
    "you tilt your head."
)
SEE_PROFESSIONAL = (
    "If the difference persists or comes with pain, numbness or dizziness, consult a "
    "physiotherapist or physician."
)
BOTH_FLEXIBLE = (
    "Your neck moves through a wide range. Balance it with neck and upper-back "
    "strengthening to keep the joints stable."
)
MAINTAIN = (
    "Your lateral flexion is within the normal range on both sides. Keep it up with "
    "regular stretching and good posture."
)

_LIMITED = (FlexibilityCategory.STIFF, FlexibilityCategory.SLIGHTLY_STIFF)


def _tighter_side(right_angle: float, left_angle: float) -> str:
    return "right" if right_angle < left_angle else "left"


def generate_recommendations(
    right_flexibility: FlexibilityCategory,
    left_flexibility: FlexibilityCategory,
    asymmetry: AsymmetryCategory,
    right_angle: float,
    left_angle: float,
) -> List[str]:
    right_flexibility = FlexibilityCategory(right_flexibility)
    left_flexibility = FlexibilityCategory(left_flexibility)
    asymmetry = AsymmetryCategory(asymmetry)
    recommendations: List[str] = []

    right_stiff = right_flexibility is FlexibilityCategory.STIFF
    left_stiff = left_flexibility is FlexibilityCategory.STIFF
    if right_stiff and left_stiff:
        recommendations.append(BOTH_STIFF)
    elif right_stiff:
        recommendations.append(SIDE_STIFF.format(side="right", angle=right_angle))
    elif left_stiff:
        recommendations.append(SIDE_STIFF.format(side="left", angle=left_angle))

    slightly = [
        side
        for side, category in (("right", right_flexibility), ("left", left_flexibility))
        if category is FlexibilityCategory.SLIGHTLY_STIFF
    ]
    if slightly:
        recommendations.append(SLIGHTLY_STIFF.format(sides=" and ".join(slightly)))

    diff = asymmetry_difference(right_angle, left_angle)
    side = _tighter_side(right_angle, left_angle)
    if asymmetry is AsymmetryCategory.MILD:
        recommendations.append(MILD_ASYMMETRY.format(diff=diff, side=side))
    elif asymmetry is AsymmetryCategory.MODERATE:
        recommendations.append(MODERATE_ASYMMETRY.format(diff=diff, side=side))
    elif asymmetry is AsymmetryCategory.PRONOUNCED:
        recommendations.append(PRONOUNCED_ASYMMETRY.format(diff=diff))
        recommendations.append(SEE_PROFESSIONAL)

    if right_flexibility is FlexibilityCategory.FLEXIBLE and left_flexibility is FlexibilityCategory.FLEXIBLE:
        recommendations.append(BOTH_FLEXIBLE)

    if (
        right_flexibility not in _LIMITED
        and left_flexibility not in _LIMITED
        and asymmetry is AsymmetryCategory.NORMAL
    ):
        recommendations.append(MAINTAIN)

    return recommendations
